from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid
from mainalysis.database import Base


class DomainHistoryItem(Base):
    __tablename__ = "domain_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    account_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    domain_name = Column(String(255), nullable=False)
    price = Column(String(80), nullable=False, default="0")
    analyzed_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
