from mainalysis.schemas.account import AccountConnect, AccountUpdate, AccountResponse
from mainalysis.schemas.analysis import AnalyzeDomainRequest, AnalyzeDomainResponse
from mainalysis.schemas.credit import CreditBalanceResponse, CreditTransactionResponse, CreditPackageResponse
from mainalysis.schemas.payment import CreateOrderRequest, CaptureOrderRequest
from mainalysis.schemas.history import HistoryCreate, HistoryItemResponse
from mainalysis.schemas.domain_of_the_day import (
    DomainOfTheDayCreate,
    DomainOfTheDayUpdate,
    DomainOfTheDayResponse,
)

__all__ = [
    "AccountConnect",
    "AccountUpdate",
    "AccountResponse",
    "AnalyzeDomainRequest",
    "AnalyzeDomainResponse",
    "CreditBalanceResponse",
    "CreditTransactionResponse",
    "CreditPackageResponse",
    "CreateOrderRequest",
    "CaptureOrderRequest",
    "HistoryCreate",
    "HistoryItemResponse",
    "DomainOfTheDayCreate",
    "DomainOfTheDayUpdate",
    "DomainOfTheDayResponse",
]
