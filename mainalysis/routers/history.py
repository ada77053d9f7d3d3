"""
Router para histórico de domínios consultados
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from uuid import UUID
from mainalysis.config import settings
from mainalysis.database import get_db
from mainalysis.schemas.history import HistoryCreate, HistoryItemResponse
from mainalysis.services.account_service import get_account
from mainalysis.services.history_service import add_history_item, get_history

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/history")
async def record_history(
    payload: HistoryCreate,
    db: Session = Depends(get_db)
):
    """
    Registra a consulta de um domínio. Consultas repetidas em poucos
    segundos são ignoradas (recorded=false).
    """
    if get_account(db, payload.account_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found"
        )

    item = add_history_item(
        db,
        payload.account_id,
        payload.domain_name,
        payload.price,
        dedup_seconds=settings.HISTORY_DEDUP_SECONDS,
    )
    return {"recorded": item is not None}


@router.get("/history/{account_id}", response_model=List[HistoryItemResponse])
async def list_history(
    account_id: UUID,
    db: Session = Depends(get_db)
):
    return get_history(db, account_id, limit=settings.HISTORY_LIMIT)
