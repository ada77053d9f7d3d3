from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.sql import func
import uuid
from mainalysis.database import Base


class PaymentOrder(Base):
    __tablename__ = "payment_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    order_id = Column(String(64), unique=True, nullable=False, index=True)  # ID da order no PayPal
    account_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    credits = Column(Integer, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    status = Column(String(32), nullable=False, default="CREATED")
    capture_id = Column(String(64), nullable=True)
    credited_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
