from mainalysis.database import Base
from mainalysis.models.account import Account
from mainalysis.models.credit import CreditBalance, CreditTransaction, CreditPackage
from mainalysis.models.analyzed_domain import AnalyzedDomain, AnalysisClaim
from mainalysis.models.domain_history import DomainHistoryItem
from mainalysis.models.payment_order import PaymentOrder
from mainalysis.models.domain_of_the_day import DomainOfTheDay

__all__ = [
    "Base",
    "Account",
    "CreditBalance",
    "CreditTransaction",
    "CreditPackage",
    "AnalyzedDomain",
    "AnalysisClaim",
    "DomainHistoryItem",
    "PaymentOrder",
    "DomainOfTheDay",
]
