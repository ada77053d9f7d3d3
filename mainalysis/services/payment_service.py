"""
Compra de créditos via PayPal: order -> captura -> crédito.

Os créditos só entram no livro-razão quando a captura volta COMPLETED, e isso
acontece na mesma transação que marca a order como creditada. Uma segunda
captura da mesma order não credita de novo.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict
from uuid import UUID
from sqlalchemy.orm import Session
from mainalysis.config import settings
from mainalysis.models.payment_order import PaymentOrder
from mainalysis.services import credit_service
from mainalysis.services.paypal_client import PayPalClient, PayPalError

logger = logging.getLogger(__name__)

STATUS_COMPLETED = "COMPLETED"
ISSUE_ALREADY_CAPTURED = "ORDER_ALREADY_CAPTURED"


class PaymentError(Exception):
    """Erro base do fluxo de pagamento"""
    pass


class PaymentOrderNotFound(PaymentError):
    pass


class PaymentNotCompleted(PaymentError):
    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Payment not completed. Status: {status}")


def order_total(credits: int) -> str:
    """Valor da order com duas casas decimais."""
    total = Decimal(str(settings.PRICE_PER_CREDIT)) * credits
    return str(total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def create_credit_order(
    db: Session,
    client: PayPalClient,
    account_id: UUID,
    credits: int,
    origin: str = "",
) -> PaymentOrder:
    """
    Cria a order no PayPal e registra a quantidade de créditos comprada.
    """
    amount = order_total(credits)
    purchase_url = f"{origin}/purchase"

    order = client.create_order(
        amount=amount,
        description=f"{credits} {settings.PAYPAL_BRAND_NAME} Credits",
        custom_id=str(account_id),
        return_url=purchase_url,
        cancel_url=purchase_url,
    )

    payment = PaymentOrder(
        order_id=order["id"],
        account_id=account_id,
        credits=credits,
        amount=Decimal(amount),
        currency=settings.PAYPAL_CURRENCY,
        status=order.get("status", "CREATED"),
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)

    logger.info(f"PayPal order created: {payment.order_id} (account={account_id}, credits={credits})")
    return payment


def capture_credit_order(
    db: Session,
    client: PayPalClient,
    order_id: str,
    account_id: UUID,
) -> Dict[str, Any]:
    """
    Captura a order e credita a conta se o PayPal confirmar COMPLETED.

    Raises:
        PaymentOrderNotFound: order desconhecida ou de outra conta
        PaymentNotCompleted: status diferente de COMPLETED (nada é creditado)
    """
    payment = db.query(PaymentOrder).filter(
        PaymentOrder.order_id == order_id,
        PaymentOrder.account_id == account_id,
    ).first()

    if not payment:
        raise PaymentOrderNotFound(f"Order {order_id} not found for account {account_id}")

    if payment.credited_at is not None:
        logger.info(f"Order {order_id} already credited, skipping")
        return {"success": True, "captureId": payment.capture_id, "status": payment.status}

    try:
        capture = client.capture_order(order_id)
    except PayPalError as e:
        if e.issue != ISSUE_ALREADY_CAPTURED:
            raise
        # Captura anterior concluída no PayPal sem o crédito ter sido gravado
        logger.warning(f"PayPal order {order_id} already captured, checking order status")
        capture = client.get_order(order_id)

    status = capture.get("status", "UNKNOWN")
    capture_id = capture.get("id")

    if status != STATUS_COMPLETED:
        payment.status = status
        db.commit()
        logger.warning(f"PayPal order {order_id} not completed: {status}")
        raise PaymentNotCompleted(status)

    # Trava a order e relê do banco: outra captura pode ter creditado nesse meio tempo
    payment = db.query(PaymentOrder).filter(
        PaymentOrder.id == payment.id
    ).with_for_update().populate_existing().first()
    if payment.credited_at is not None:
        result = {"success": True, "captureId": payment.capture_id, "status": payment.status}
        db.rollback()
        logger.info(f"Order {order_id} credited by a concurrent capture, skipping")
        return result

    credit_service.add_credits(
        db,
        account_id,
        payment.credits,
        description=f"PayPal purchase - {payment.credits} credits",
        metadata={
            "purchase_type": "paypal",
            "amount": payment.credits,
            "orderId": order_id,
            "captureId": capture_id,
        },
        commit=False,
    )
    payment.status = status
    payment.capture_id = capture_id
    payment.credited_at = datetime.now(timezone.utc)
    db.commit()

    logger.info(f"PayPal order {order_id} captured, {payment.credits} credits added to {account_id}")
    return {"success": True, "captureId": capture_id, "status": status}
