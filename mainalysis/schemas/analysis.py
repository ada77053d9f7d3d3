from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional
from uuid import UUID
from mainalysis.services.analysis_service import AnalysisSource


class AnalyzeDomainRequest(BaseModel):
    domain_name: str = Field(alias="domainName")
    account_id: UUID = Field(alias="accountId")
    price: Optional[int] = Field(default=None, ge=0)  # wei
    source: AnalysisSource = AnalysisSource.NEW_ANALYSIS

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("domain_name")
    @classmethod
    def strip_domain(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("domainName must not be empty")
        return value


class AnalyzeDomainResponse(BaseModel):
    success: bool = True
    cached: bool
    data: Dict[str, Any]
    price: str
    credits_charged: int = Field(default=0, serialization_alias="creditsCharged")
