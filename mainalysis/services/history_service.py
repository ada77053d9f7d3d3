"""
Histórico de domínios consultados por conta (apenas informativo)
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from mainalysis.models.domain_history import DomainHistoryItem

logger = logging.getLogger(__name__)


def add_history_item(
    db: Session,
    account_id: UUID,
    domain_name: str,
    price: str,
    dedup_seconds: int = 5,
) -> Optional[DomainHistoryItem]:
    """
    Registra a consulta. Repetições do mesmo domínio pela mesma conta
    dentro de dedup_seconds são ignoradas (retorna None).
    """
    now = datetime.now(timezone.utc)
    window_start = now - timedelta(seconds=dedup_seconds)

    recent = db.query(DomainHistoryItem).filter(
        DomainHistoryItem.account_id == account_id,
        DomainHistoryItem.domain_name == domain_name,
        DomainHistoryItem.analyzed_at >= window_start,
    ).first()
    if recent:
        logger.debug(f"Skipping duplicate history item: {account_id} {domain_name}")
        return None

    item = DomainHistoryItem(
        account_id=account_id,
        domain_name=domain_name,
        price=price,
        analyzed_at=now,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def get_history(db: Session, account_id: UUID, limit: int = 50) -> List[DomainHistoryItem]:
    return db.query(DomainHistoryItem).filter(
        DomainHistoryItem.account_id == account_id
    ).order_by(
        DomainHistoryItem.analyzed_at.desc()
    ).limit(limit).all()
