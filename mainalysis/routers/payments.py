"""
Router para compra de créditos via PayPal
"""
import logging
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from mainalysis.config import settings
from mainalysis.database import get_db
from mainalysis.exceptions import ConfigurationError
from mainalysis.middleware.rate_limit import limiter
from mainalysis.utils.responses import error_response
from mainalysis.schemas.payment import CreateOrderRequest, CaptureOrderRequest
from mainalysis.services.account_service import get_account
from mainalysis.services.payment_service import (
    create_credit_order,
    capture_credit_order,
    PaymentNotCompleted,
    PaymentOrderNotFound,
)
from mainalysis.services.paypal_client import PayPalClient, PayPalError, get_paypal_client

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/create-paypal-order")
@limiter.limit(settings.RATE_LIMIT_PER_IP)
async def create_paypal_order(
    request: Request,
    payload: CreateOrderRequest,
    db: Session = Depends(get_db),
    client: PayPalClient = Depends(get_paypal_client),
):
    """
    Cria uma order no PayPal para `amount` créditos.

    Returns:
        {"orderId": ...} para o botão do PayPal no frontend
    """
    if get_account(db, payload.account_id) is None:
        return error_response(status.HTTP_404_NOT_FOUND, "Account not found")

    try:
        payment = create_credit_order(
            db=db,
            client=client,
            account_id=payload.account_id,
            credits=payload.amount,
            origin=request.headers.get("origin") or "",
        )
    except ConfigurationError as e:
        logger.error(f"PayPal configuration error: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except PayPalError as e:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except Exception as e:
        logger.error(f"Error creating PayPal order: {e}", exc_info=True)
        db.rollback()
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create order")

    return {"orderId": payment.order_id}


@router.post("/capture-paypal-order")
@limiter.limit(settings.RATE_LIMIT_PER_IP)
async def capture_paypal_order(
    request: Request,
    payload: CaptureOrderRequest,
    db: Session = Depends(get_db),
    client: PayPalClient = Depends(get_paypal_client),
):
    """
    Captura a order aprovada pelo comprador e credita a conta.
    Só credita quando o PayPal retorna COMPLETED.
    """
    try:
        return capture_credit_order(
            db=db,
            client=client,
            order_id=payload.order_id,
            account_id=payload.account_id,
        )
    except PaymentOrderNotFound as e:
        return error_response(status.HTTP_404_NOT_FOUND, str(e))
    except PaymentNotCompleted as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))
    except ConfigurationError as e:
        logger.error(f"PayPal configuration error: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except PayPalError as e:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except Exception as e:
        logger.error(f"Error capturing PayPal order: {e}", exc_info=True)
        db.rollback()
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to capture order")
