"""
Router para consulta de créditos
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from uuid import UUID
from mainalysis.config import settings
from mainalysis.database import get_db
from mainalysis.schemas.credit import (
    CreditBalanceResponse,
    CreditTransactionResponse,
    CreditPackageResponse,
)
from mainalysis.services import credit_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/credits/packages", response_model=List[CreditPackageResponse])
async def list_packages(db: Session = Depends(get_db)):
    return credit_service.get_packages(db)


@router.get("/credits/price")
async def package_price(
    credits: int = Query(..., ge=1, le=100000, description="Quantidade de créditos")
):
    """Preço base, desconto por volume e preço final de um pacote."""
    return {"credits": credits, **credit_service.calculate_package_price(credits)}


@router.get("/credits/{account_id}", response_model=CreditBalanceResponse)
async def get_credits(
    account_id: UUID,
    db: Session = Depends(get_db)
):
    """
    Retorna o saldo de créditos da conta (zeros se a conta não tiver saldo).
    """
    balance = credit_service.get_balance(db, account_id)
    if not balance:
        return CreditBalanceResponse()

    return CreditBalanceResponse(
        balance=balance.balance,
        total_purchased=balance.total_purchased,
        total_used=balance.total_used,
    )


@router.get("/credits/{account_id}/transactions", response_model=List[CreditTransactionResponse])
async def get_transactions(
    account_id: UUID,
    limit: int = Query(settings.TRANSACTION_HISTORY_LIMIT, ge=1, le=200),
    db: Session = Depends(get_db)
):
    return credit_service.get_transactions(db, account_id, limit=limit)
