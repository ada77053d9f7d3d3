"""
Router para contas (carteiras conectadas)
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from mainalysis.database import get_db
from mainalysis.schemas.account import AccountConnect, AccountUpdate, AccountResponse
from mainalysis.services.account_service import (
    get_or_create_account,
    get_account_by_wallet,
    update_account,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/accounts", response_model=AccountResponse)
async def connect_account(
    payload: AccountConnect,
    db: Session = Depends(get_db)
):
    """
    Busca ou cria a conta da carteira conectada.
    O endereço é normalizado para minúsculas.
    """
    try:
        return get_or_create_account(db, payload.wallet_address)
    except Exception as e:
        logger.error(f"Erro ao conectar conta: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to connect account"
        )


@router.get("/accounts/{wallet_address}", response_model=AccountResponse)
async def get_account_endpoint(
    wallet_address: str,
    db: Session = Depends(get_db)
):
    account = get_account_by_wallet(db, wallet_address)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found"
        )
    return account


@router.patch("/accounts/{wallet_address}", response_model=AccountResponse)
async def update_account_endpoint(
    wallet_address: str,
    payload: AccountUpdate,
    db: Session = Depends(get_db)
):
    """Atualiza nome de exibição, email e avatar."""
    account = get_account_by_wallet(db, wallet_address)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found"
        )
    return update_account(db, account, payload.model_dump(exclude_unset=True))
