"""
Serviço de contas (identificadas pelo endereço da carteira)
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from mainalysis.models.account import Account
from mainalysis.models.credit import CreditBalance

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("display_name", "email", "avatar_url")


def normalize_wallet_address(wallet_address: str) -> str:
    return wallet_address.strip().lower()


def get_account(db: Session, account_id: UUID) -> Optional[Account]:
    return db.query(Account).filter(Account.id == account_id).first()


def get_account_by_wallet(db: Session, wallet_address: str) -> Optional[Account]:
    return db.query(Account).filter(
        Account.wallet_address == normalize_wallet_address(wallet_address)
    ).first()


def get_or_create_account(db: Session, wallet_address: str) -> Account:
    """
    Busca a conta da carteira ou cria uma nova (com saldo zerado).
    Atualiza last_login quando a conta já existe.
    """
    address = normalize_wallet_address(wallet_address)

    account = get_account_by_wallet(db, address)
    if account:
        account.last_login = datetime.now(timezone.utc)
        db.commit()
        db.refresh(account)
        return account

    account = Account(wallet_address=address, display_name="", email="", avatar_url="")
    db.add(account)
    try:
        db.flush()
        db.add(CreditBalance(account_id=account.id, balance=0, total_purchased=0, total_used=0))
        db.commit()
    except IntegrityError:
        # Outra requisição criou a mesma carteira
        db.rollback()
        account = get_account_by_wallet(db, address)
        if account is None:
            raise
        return account

    db.refresh(account)
    logger.info(f"Account created: {account.id} ({address})")
    return account


def update_account(db: Session, account: Account, updates: Dict[str, str]) -> Account:
    for field in UPDATABLE_FIELDS:
        if updates.get(field) is not None:
            setattr(account, field, updates[field])
    db.commit()
    db.refresh(account)
    return account
