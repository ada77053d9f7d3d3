from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from uuid import UUID


class AccountConnect(BaseModel):
    wallet_address: str = Field(alias="walletAddress", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class AccountUpdate(BaseModel):
    display_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


class AccountResponse(BaseModel):
    id: UUID
    wallet_address: str
    display_name: str
    email: str
    avatar_url: str
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
