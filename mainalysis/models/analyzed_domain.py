from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, JSON, Uuid
from sqlalchemy.sql import func
import uuid
from mainalysis.database import Base


class AnalyzedDomain(Base):
    """Cache de análises: uma linha por (conta, domínio)."""
    __tablename__ = "analyzed_domains"
    __table_args__ = (
        UniqueConstraint("account_id", "domain_name", name="uq_analyzed_domains_account_domain"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    account_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    domain_name = Column(String(255), nullable=False, index=True)
    price = Column(String(80), nullable=False, default="0")  # wei, como string
    analysis_data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class AnalysisClaim(Base):
    """Marcador de análise em andamento para (conta, domínio)."""
    __tablename__ = "analysis_claims"
    __table_args__ = (
        UniqueConstraint("account_id", "domain_name", name="uq_analysis_claims_account_domain"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    domain_name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
