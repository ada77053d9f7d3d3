from sqlalchemy import Column, String, Integer, Date, DateTime, Float, Text, JSON, Uuid
from sqlalchemy.sql import func
import uuid
from mainalysis.database import Base


class DomainOfTheDay(Base):
    __tablename__ = "domain_of_the_day"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    domain_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    valuation = Column(Float, nullable=False, default=0)
    market_score = Column(Integer, nullable=False, default=0)
    seo_value = Column(String(100), nullable=False, default="")
    growth_potential = Column(String(100), nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    featured_date = Column(Date, nullable=False, index=True)
    created_by = Column(String(255), nullable=False, index=True)  # sub do JWT Supabase
    created_at = Column(DateTime(timezone=True), server_default=func.now())
