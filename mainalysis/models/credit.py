from sqlalchemy import Column, String, Integer, Boolean, Numeric, DateTime, ForeignKey, CheckConstraint, JSON, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from mainalysis.database import Base

TRANSACTION_PURCHASE = "purchase"
TRANSACTION_USAGE = "usage"


class CreditBalance(Base):
    __tablename__ = "credit_balances"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_credit_balances_balance_non_negative"),
    )

    account_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    balance = Column(Integer, nullable=False, default=0)
    total_purchased = Column(Integer, nullable=False, default=0)
    total_used = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    account = relationship("Account", back_populates="credit_balance")


class CreditTransaction(Base):
    """Entrada do livro-razão. Nunca é alterada nem removida."""
    __tablename__ = "credit_transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    account_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False, index=True)  # 'purchase' | 'usage'
    amount = Column(Integer, nullable=False)
    balance_after = Column(Integer, nullable=False)
    description = Column(String(500), nullable=False, default="")
    # "metadata" é reservado no declarative
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)


class CreditPackage(Base):
    __tablename__ = "credit_packages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(100), nullable=False)
    credits = Column(Integer, nullable=False)
    base_price = Column(Numeric(10, 2), nullable=False)
    final_price = Column(Numeric(10, 2), nullable=False)
    features = Column(JSON, nullable=False, default=list)
    is_popular = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0, index=True)
