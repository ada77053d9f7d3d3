from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from uuid import UUID


class HistoryCreate(BaseModel):
    account_id: UUID = Field(alias="accountId")
    domain_name: str = Field(alias="domainName", min_length=1)
    price: str = "0"

    model_config = ConfigDict(populate_by_name=True)


class HistoryItemResponse(BaseModel):
    id: UUID
    account_id: UUID
    domain_name: str
    price: str
    analyzed_at: datetime

    model_config = ConfigDict(from_attributes=True)
