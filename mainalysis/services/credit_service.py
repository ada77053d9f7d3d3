"""
Livro-razão de créditos: saldo por conta e histórico de transações.

Toda mutação de saldo passa por use_credits/add_credits. A linha de saldo é
travada (SELECT ... FOR UPDATE) antes de ser alterada, então compras e usos
concorrentes da mesma conta são serializados pelo banco.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from mainalysis.models.credit import (
    CreditBalance,
    CreditTransaction,
    CreditPackage,
    TRANSACTION_PURCHASE,
    TRANSACTION_USAGE,
)

logger = logging.getLogger(__name__)

PACKAGE_PRICE_PER_CREDIT = Decimal("0.20")
PACKAGE_BULK_DISCOUNT = Decimal("10")  # por bloco completo de 1000 créditos


def get_balance(db: Session, account_id: UUID) -> Optional[CreditBalance]:
    """Retorna o saldo da conta ou None se a conta não tiver saldo."""
    return db.query(CreditBalance).filter(CreditBalance.account_id == account_id).first()


def _lock_balance(db: Session, account_id: UUID) -> Optional[CreditBalance]:
    return db.query(CreditBalance).filter(
        CreditBalance.account_id == account_id
    ).with_for_update().first()


def use_credits(
    db: Session,
    account_id: UUID,
    amount: int,
    description: str = "",
    metadata: Optional[Dict[str, Any]] = None,
    commit: bool = True,
) -> bool:
    """
    Debita créditos da conta.

    Retorna False (sem débito parcial e sem transação registrada) quando o
    saldo é menor que amount ou a conta não tem saldo.

    Args:
        db: Sessão do banco de dados
        account_id: ID da conta
        amount: Quantidade de créditos (> 0)
        description: Texto da transação
        metadata: Dados extras da transação
        commit: Se False, o chamador controla o commit/rollback

    Returns:
        True se o débito foi aplicado
    """
    if amount <= 0:
        raise ValueError("amount must be positive")

    balance = _lock_balance(db, account_id)
    if balance is None:
        logger.warning(f"use_credits: no balance for account {account_id}")
        return False

    if balance.balance < amount:
        logger.info(
            f"use_credits refused: account={account_id}, balance={balance.balance}, requested={amount}"
        )
        return False

    balance.balance = balance.balance - amount
    balance.total_used = (balance.total_used or 0) + amount

    db.add(CreditTransaction(
        account_id=account_id,
        type=TRANSACTION_USAGE,
        amount=amount,
        balance_after=balance.balance,
        description=description,
        metadata_=metadata or {},
    ))
    db.flush()

    if commit:
        db.commit()

    logger.info(f"Credits used: account={account_id}, amount={amount}, balance_after={balance.balance}")
    return True


def add_credits(
    db: Session,
    account_id: UUID,
    amount: int,
    description: str = "",
    metadata: Optional[Dict[str, Any]] = None,
    commit: bool = True,
) -> CreditBalance:
    """
    Credita a conta e registra uma transação de compra.
    Cria a linha de saldo se ainda não existir.
    """
    if amount <= 0:
        raise ValueError("amount must be positive")

    balance = _lock_balance(db, account_id)
    if balance is None:
        balance = CreditBalance(account_id=account_id, balance=0, total_purchased=0, total_used=0)
        db.add(balance)

    balance.balance = (balance.balance or 0) + amount
    balance.total_purchased = (balance.total_purchased or 0) + amount

    db.add(CreditTransaction(
        account_id=account_id,
        type=TRANSACTION_PURCHASE,
        amount=amount,
        balance_after=balance.balance,
        description=description,
        metadata_=metadata or {},
    ))
    db.flush()

    if commit:
        db.commit()
        db.refresh(balance)

    logger.info(f"Credits added: account={account_id}, amount={amount}, balance_after={balance.balance}")
    return balance


def get_transactions(db: Session, account_id: UUID, limit: int = 50) -> List[CreditTransaction]:
    """Histórico de transações, mais recentes primeiro."""
    return db.query(CreditTransaction).filter(
        CreditTransaction.account_id == account_id
    ).order_by(
        CreditTransaction.created_at.desc()
    ).limit(limit).all()


def get_packages(db: Session) -> List[CreditPackage]:
    return db.query(CreditPackage).order_by(CreditPackage.sort_order.asc()).all()


def calculate_package_price(credits: int) -> Dict[str, float]:
    """
    Calcula o preço de um pacote: 0.20 por crédito com desconto de 10.00
    a cada 1000 créditos completos. Nunca negativo.
    """
    base_price = PACKAGE_PRICE_PER_CREDIT * credits
    discount = PACKAGE_BULK_DISCOUNT * (credits // 1000)
    final_price = max(Decimal("0"), base_price - discount)

    def _money(value: Decimal) -> float:
        return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    return {
        "base_price": _money(base_price),
        "final_price": _money(final_price),
        "discount": _money(discount),
    }
