"""
Orquestração de análise de domínios: cache por (conta, domínio), cobrança de
créditos e persistência do resultado.

Fluxo de uma análise nova:
    1. cache hit -> retorna sem cobrar
    2. saldo insuficiente -> recusa antes de chamar o provider
    3. claim (conta, domínio) -> evita duas análises pagas simultâneas
    4. chamada ao provider
    5. débito + upsert + remoção do claim numa única transação
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_FLOOR
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from mainalysis.config import settings
from mainalysis.models.analyzed_domain import AnalyzedDomain, AnalysisClaim
from mainalysis.services import credit_service
from mainalysis.services.account_service import get_account
from mainalysis.services.valuation_client import ValuationClient

logger = logging.getLogger(__name__)

WEI_PER_ETH = Decimal(10) ** 18


class AnalysisSource(str, Enum):
    SEARCH_LISTED = "search_listed"
    NEW_ANALYSIS = "new_analysis"
    FRACTIONALIZE = "fractionalize"


CREDIT_COSTS = {
    AnalysisSource.SEARCH_LISTED: 1,
    AnalysisSource.NEW_ANALYSIS: 3,
    AnalysisSource.FRACTIONALIZE: 3,
}

SOURCE_LABELS = {
    AnalysisSource.SEARCH_LISTED: "Search Listed Domain",
    AnalysisSource.NEW_ANALYSIS: "New Analysis",
    AnalysisSource.FRACTIONALIZE: "Fractionalize Domain",
}


class AnalysisError(Exception):
    """Erro base do fluxo de análise"""
    pass


class AccountNotFound(AnalysisError):
    pass


class InsufficientCredits(AnalysisError):
    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient credits. Available: {available}, required: {required}"
        )


class AnalysisInProgress(AnalysisError):
    pass


class AnalysisPersistenceError(AnalysisError):
    pass


@dataclass
class AnalysisResult:
    data: Dict[str, Any]
    cached: bool
    price: str
    credits_charged: int = 0


def credit_cost(source: AnalysisSource) -> int:
    return CREDIT_COSTS[AnalysisSource(source)]


def get_cached_analysis(db: Session, account_id: UUID, domain_name: str) -> Optional[AnalyzedDomain]:
    return db.query(AnalyzedDomain).filter(
        AnalyzedDomain.account_id == account_id,
        AnalyzedDomain.domain_name == domain_name,
    ).first()


def upsert_analysis(
    db: Session,
    account_id: UUID,
    domain_name: str,
    price: str,
    analysis_data: Dict[str, Any],
    commit: bool = True,
) -> AnalyzedDomain:
    """
    Grava a análise de (conta, domínio). Uma reanálise sobrescreve a linha
    existente, mantendo sempre uma única linha por chave.
    """
    row = get_cached_analysis(db, account_id, domain_name)
    if row is None:
        row = AnalyzedDomain(account_id=account_id, domain_name=domain_name)
        db.add(row)

    row.price = price
    row.analysis_data = analysis_data
    db.flush()

    if commit:
        db.commit()
        db.refresh(row)
    return row


def resolve_final_price(analysis_data: Dict[str, Any], price: Optional[int]) -> str:
    """
    Preço final em wei (string). Um preço informado pelo chamador é mantido;
    sem preço, usa estimatedPrice (ETH) do provider.
    """
    if price:
        return str(int(price))

    estimated = analysis_data.get("estimatedPrice")
    if estimated:
        try:
            wei = (Decimal(str(estimated)) * WEI_PER_ETH).to_integral_value(rounding=ROUND_FLOOR)
            if wei > 0:
                return str(int(wei))
            logger.warning(f"Non-positive estimatedPrice from provider: {estimated!r}")
        except (ArithmeticError, ValueError):
            logger.warning(f"Invalid estimatedPrice from provider: {estimated!r}")

    return "0"


def _claim(db: Session, account_id: UUID, domain_name: str) -> None:
    """
    Registra a análise em andamento. Um claim vivo da mesma chave gera
    AnalysisInProgress; um claim expirado é substituído.
    """
    now = datetime.now(timezone.utc)
    for attempt in range(2):
        db.add(AnalysisClaim(account_id=account_id, domain_name=domain_name, created_at=now))
        try:
            db.commit()
            return
        except IntegrityError:
            db.rollback()

        existing = db.query(AnalysisClaim).filter(
            AnalysisClaim.account_id == account_id,
            AnalysisClaim.domain_name == domain_name,
        ).first()
        if existing is None:
            continue

        created_at = existing.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        if attempt == 0 and now - created_at > timedelta(seconds=settings.ANALYSIS_CLAIM_TTL_SECONDS):
            logger.warning(f"Replacing stale analysis claim: account={account_id}, domain={domain_name}")
            db.delete(existing)
            db.commit()
            continue
        break

    raise AnalysisInProgress(f"Analysis of {domain_name} is already in progress")


def _release_claim(db: Session, account_id: UUID, domain_name: str) -> None:
    try:
        db.query(AnalysisClaim).filter(
            AnalysisClaim.account_id == account_id,
            AnalysisClaim.domain_name == domain_name,
        ).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error(
            f"Failed to release analysis claim: account={account_id}, domain={domain_name}",
            exc_info=True,
        )


def analyze_domain(
    db: Session,
    domain_name: str,
    account_id: UUID,
    client: ValuationClient,
    source: AnalysisSource = AnalysisSource.NEW_ANALYSIS,
    price: Optional[int] = None,
) -> AnalysisResult:
    """
    Retorna a análise de domain_name para a conta, cobrando créditos só
    quando a análise é nova.

    Raises:
        AccountNotFound: conta inexistente
        InsufficientCredits: saldo menor que o custo (provider não é chamado)
        AnalysisInProgress: outra análise da mesma chave em andamento
        ValuationProviderError / ConfigurationError: falha do provider (nada é cobrado)
        AnalysisPersistenceError: falha ao gravar (débito desfeito)
    """
    source = AnalysisSource(source)

    if get_account(db, account_id) is None:
        raise AccountNotFound(f"Account {account_id} not found")

    cached = get_cached_analysis(db, account_id, domain_name)
    if cached:
        logger.info(f"Using cached analysis: account={account_id}, domain={domain_name}")
        return AnalysisResult(data=cached.analysis_data, cached=True, price=cached.price, credits_charged=0)

    cost = credit_cost(source)

    balance = credit_service.get_balance(db, account_id)
    available = balance.balance if balance else 0
    if available < cost:
        raise InsufficientCredits(required=cost, available=available)

    _claim(db, account_id, domain_name)
    try:
        # Outra requisição pode ter concluído a análise entre a leitura do cache e o claim
        cached = get_cached_analysis(db, account_id, domain_name)
        if cached:
            _release_claim(db, account_id, domain_name)
            logger.info(f"Analysis finished concurrently, using cache: account={account_id}, domain={domain_name}")
            return AnalysisResult(data=cached.analysis_data, cached=True, price=cached.price, credits_charged=0)

        analysis_data = client.analyze(domain_name, price)
        final_price = resolve_final_price(analysis_data, price)

        charged = credit_service.use_credits(
            db,
            account_id,
            cost,
            description=f"{SOURCE_LABELS[source]} - {domain_name}",
            metadata={
                "domain_name": domain_name,
                "source": source.value,
                "credits_used": cost,
                "cached": False,
            },
            commit=False,
        )
        if not charged:
            db.rollback()
            current = credit_service.get_balance(db, account_id)
            raise InsufficientCredits(required=cost, available=current.balance if current else 0)

        try:
            upsert_analysis(db, account_id, domain_name, final_price, analysis_data, commit=False)
            db.query(AnalysisClaim).filter(
                AnalysisClaim.account_id == account_id,
                AnalysisClaim.domain_name == domain_name,
            ).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save analysis for {domain_name}: {e}", exc_info=True)
            raise AnalysisPersistenceError(f"Failed to save analysis: {e}")

    except Exception:
        _release_claim(db, account_id, domain_name)
        raise

    logger.info(
        f"Domain analyzed: account={account_id}, domain={domain_name}, source={source.value}, credits={cost}"
    )
    return AnalysisResult(data=analysis_data, cached=False, price=final_price, credits_charged=cost)
