from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID


class DomainOfTheDayCreate(BaseModel):
    domain_name: Optional[str] = None
    description: str = ""
    valuation: float = 0
    market_score: int = 0
    seo_value: str = ""
    growth_potential: str = ""
    tags: List[str] = []
    featured_date: Optional[date] = None


class DomainOfTheDayUpdate(BaseModel):
    domain_name: Optional[str] = None
    description: Optional[str] = None
    valuation: Optional[float] = None
    market_score: Optional[int] = None
    seo_value: Optional[str] = None
    growth_potential: Optional[str] = None
    tags: Optional[List[str]] = None
    featured_date: Optional[date] = None


class DomainOfTheDayResponse(BaseModel):
    id: UUID
    domain_name: str
    description: str
    valuation: float
    market_score: int
    seo_value: str
    growth_potential: str
    tags: List[str]
    featured_date: date
    created_by: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
