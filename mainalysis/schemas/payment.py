from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID


class CreateOrderRequest(BaseModel):
    amount: int = Field(gt=0, le=100000)  # quantidade de créditos
    account_id: UUID = Field(alias="accountId")

    model_config = ConfigDict(populate_by_name=True)


class CaptureOrderRequest(BaseModel):
    order_id: str = Field(alias="orderId", min_length=1)
    account_id: UUID = Field(alias="accountId")

    model_config = ConfigDict(populate_by_name=True)
