from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from mainalysis.database import Base


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    wallet_address = Column(String(64), unique=True, nullable=False, index=True)  # sempre minúsculo
    display_name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    avatar_url = Column(String(1024), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    credit_balance = relationship("CreditBalance", back_populates="account", uselist=False)
