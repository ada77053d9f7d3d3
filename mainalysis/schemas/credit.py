from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID


class CreditBalanceResponse(BaseModel):
    balance: int = 0
    total_purchased: int = 0
    total_used: int = 0


class CreditTransactionResponse(BaseModel):
    id: UUID
    account_id: UUID
    type: str
    amount: int
    balance_after: int
    description: str
    metadata: Dict[str, Any] = Field(validation_alias="metadata_")
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CreditPackageResponse(BaseModel):
    id: UUID
    name: str
    credits: int
    base_price: Decimal
    final_price: Decimal
    features: List[str] = []
    is_popular: bool
    sort_order: int

    model_config = ConfigDict(from_attributes=True)
