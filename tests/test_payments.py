"""
Testes para compra de créditos (PayPal)
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import patch, MagicMock
import pytest
from mainalysis.database import SessionLocal
from mainalysis.exceptions import ConfigurationError
from mainalysis.models.credit import CreditTransaction
from mainalysis.models.payment_order import PaymentOrder
from mainalysis.services import credit_service
from mainalysis.services.payment_service import capture_credit_order, order_total
from mainalysis.services.paypal_client import PayPalClient, PayPalError


def _create_order(client, fake_paypal, account, amount=50, order_id="ORDER-1"):
    fake_paypal.create_order.return_value = {"id": order_id, "status": "CREATED"}
    return client.post(
        "/api/v1/create-paypal-order",
        json={"amount": amount, "accountId": str(account.id)},
        headers={"Origin": "https://app.example.com"},
    )


def _balance(db, account_id):
    db.expire_all()
    return credit_service.get_balance(db, account_id).balance


def test_order_total():
    assert order_total(50) == "25.00"
    assert order_total(1) == "0.50"
    assert order_total(3) == "1.50"


def test_create_order(client, db_session, test_account, fake_paypal):
    response = _create_order(client, fake_paypal, test_account)

    assert response.status_code == 200
    assert response.json() == {"orderId": "ORDER-1"}

    kwargs = fake_paypal.create_order.call_args.kwargs
    assert kwargs["amount"] == "25.00"
    assert kwargs["custom_id"] == str(test_account.id)
    assert kwargs["return_url"] == "https://app.example.com/purchase"

    payment = db_session.query(PaymentOrder).one()
    assert payment.credits == 50
    assert payment.amount == Decimal("25.00")
    assert payment.credited_at is None


def test_create_order_does_not_credit(client, db_session, test_account, fake_paypal):
    _create_order(client, fake_paypal, test_account)

    assert _balance(db_session, test_account.id) == 10


def test_create_order_unknown_account(client, db_session, fake_paypal):
    response = client.post(
        "/api/v1/create-paypal-order",
        json={"amount": 50, "accountId": str(uuid.uuid4())},
    )

    assert response.status_code == 404
    fake_paypal.create_order.assert_not_called()


@pytest.mark.parametrize("body", [
    {"accountId": "00000000-0000-0000-0000-000000000001"},
    {"amount": 0, "accountId": "00000000-0000-0000-0000-000000000001"},
    {"amount": 50},
])
def test_create_order_invalid_body(client, db_session, body):
    response = client.post("/api/v1/create-paypal-order", json=body)

    assert response.status_code == 400
    assert "error" in response.json()


def test_create_order_paypal_not_configured(client, db_session, test_account, fake_paypal):
    fake_paypal.create_order.side_effect = ConfigurationError("PayPal credentials not configured")

    response = client.post(
        "/api/v1/create-paypal-order",
        json={"amount": 50, "accountId": str(test_account.id)},
    )

    assert response.status_code == 500
    assert response.json()["error"] == "PayPal credentials not configured"


def test_capture_completed_credits_once(client, db_session, test_account, fake_paypal):
    _create_order(client, fake_paypal, test_account)
    fake_paypal.capture_order.return_value = {"id": "ORDER-1", "status": "COMPLETED"}

    body = {"orderId": "ORDER-1", "accountId": str(test_account.id)}
    first = client.post("/api/v1/capture-paypal-order", json=body)
    second = client.post("/api/v1/capture-paypal-order", json=body)

    assert first.status_code == 200
    assert first.json() == {"success": True, "captureId": "ORDER-1", "status": "COMPLETED"}
    assert second.status_code == 200
    assert second.json()["success"] is True

    assert _balance(db_session, test_account.id) == 60
    assert fake_paypal.capture_order.call_count == 1

    purchase = db_session.query(CreditTransaction).one()
    assert purchase.amount == 50
    assert purchase.description == "PayPal purchase - 50 credits"
    assert purchase.metadata_["orderId"] == "ORDER-1"


@pytest.mark.parametrize("status", ["PENDING", "DECLINED", "VOIDED"])
def test_capture_not_completed_never_credits(client, db_session, test_account, fake_paypal, status):
    _create_order(client, fake_paypal, test_account)
    fake_paypal.capture_order.return_value = {"id": "ORDER-1", "status": status}

    response = client.post(
        "/api/v1/capture-paypal-order",
        json={"orderId": "ORDER-1", "accountId": str(test_account.id)},
    )

    assert response.status_code == 400
    assert response.json()["error"] == f"Payment not completed. Status: {status}"
    assert _balance(db_session, test_account.id) == 10
    assert db_session.query(CreditTransaction).count() == 0


def test_capture_unknown_order(client, db_session, test_account, fake_paypal):
    response = client.post(
        "/api/v1/capture-paypal-order",
        json={"orderId": "NOPE", "accountId": str(test_account.id)},
    )

    assert response.status_code == 404
    fake_paypal.capture_order.assert_not_called()


def test_capture_paypal_error(client, db_session, test_account, fake_paypal):
    _create_order(client, fake_paypal, test_account)
    fake_paypal.capture_order.side_effect = PayPalError("PayPal request failed (422): UNPROCESSABLE_ENTITY")

    response = client.post(
        "/api/v1/capture-paypal-order",
        json={"orderId": "ORDER-1", "accountId": str(test_account.id)},
    )

    assert response.status_code == 500
    assert _balance(db_session, test_account.id) == 10


class TestPayPalClient:

    @pytest.fixture
    def mock_settings(self):
        with patch('mainalysis.services.paypal_client.settings') as mock:
            mock.PAYPAL_CLIENT_ID = "client-id"
            mock.PAYPAL_CLIENT_SECRET = "secret"
            mock.PAYPAL_MODE = "sandbox"
            mock.PAYPAL_TIMEOUT = 5
            mock.PAYPAL_CURRENCY = "USD"
            mock.PAYPAL_BRAND_NAME = "Mainalysis"
            yield mock

    def test_missing_credentials(self, mock_settings):
        mock_settings.PAYPAL_CLIENT_SECRET = ""

        with pytest.raises(ConfigurationError):
            PayPalClient().get_access_token()

    def test_create_order_flow(self, mock_settings):
        token_response = MagicMock(ok=True)
        token_response.json.return_value = {"access_token": "tok"}
        order_response = MagicMock(ok=True)
        order_response.json.return_value = {"id": "ORDER-9", "status": "CREATED"}

        with patch('mainalysis.services.paypal_client.requests.post') as mock_post:
            mock_post.side_effect = [token_response, order_response]
            order = PayPalClient().create_order("25.00", "50 Mainalysis Credits", "acc", "u", "u")

        assert order["id"] == "ORDER-9"
        token_call, order_call = mock_post.call_args_list
        assert token_call.args[0] == "https://api-m.sandbox.paypal.com/v1/oauth2/token"
        assert token_call.kwargs["auth"] == ("client-id", "secret")
        assert order_call.kwargs["headers"]["Authorization"] == "Bearer tok"
        unit = order_call.kwargs["json"]["purchase_units"][0]
        assert unit["amount"] == {"currency_code": "USD", "value": "25.00"}

    def test_token_failure(self, mock_settings):
        token_response = MagicMock(ok=False, status_code=401, text="invalid_client")

        with patch('mainalysis.services.paypal_client.requests.post', return_value=token_response):
            with pytest.raises(PayPalError):
                PayPalClient().capture_order("ORDER-9")


def _pending_order(db, account, order_id="ORDER-1", credits=50):
    payment = PaymentOrder(
        order_id=order_id,
        account_id=account.id,
        credits=credits,
        amount=Decimal(order_total(credits)),
        currency="USD",
        status="CREATED",
    )
    db.add(payment)
    db.commit()
    return payment


def test_concurrent_capture_does_not_credit_twice(db_session, test_account, fake_paypal):
    _pending_order(db_session, test_account)

    def credited_by_other_request(order_id):
        other = SessionLocal()
        try:
            payment = other.query(PaymentOrder).filter(PaymentOrder.order_id == order_id).one()
            credit_service.add_credits(other, payment.account_id, payment.credits, commit=False)
            payment.status = "COMPLETED"
            payment.capture_id = "CAPTURE-1"
            payment.credited_at = datetime.now(timezone.utc)
            other.commit()
        finally:
            other.close()
        return {"id": "CAPTURE-1", "status": "COMPLETED"}

    fake_paypal.capture_order.side_effect = credited_by_other_request

    result = capture_credit_order(db_session, fake_paypal, "ORDER-1", test_account.id)

    assert result == {"success": True, "captureId": "CAPTURE-1", "status": "COMPLETED"}
    assert _balance(db_session, test_account.id) == 60
    assert db_session.query(CreditTransaction).count() == 1


def test_already_captured_order_is_credited_on_retry(db_session, test_account, fake_paypal):
    _pending_order(db_session, test_account)
    fake_paypal.capture_order.side_effect = PayPalError(
        "PayPal request failed (422): ORDER_ALREADY_CAPTURED", issue="ORDER_ALREADY_CAPTURED"
    )
    fake_paypal.get_order.return_value = {"id": "ORDER-1", "status": "COMPLETED"}

    result = capture_credit_order(db_session, fake_paypal, "ORDER-1", test_account.id)

    assert result["status"] == "COMPLETED"
    fake_paypal.get_order.assert_called_once_with("ORDER-1")
    assert _balance(db_session, test_account.id) == 60

    # nova tentativa não credita de novo
    capture_credit_order(db_session, fake_paypal, "ORDER-1", test_account.id)
    assert _balance(db_session, test_account.id) == 60


def test_other_paypal_errors_are_not_treated_as_captured(db_session, test_account, fake_paypal):
    _pending_order(db_session, test_account)
    fake_paypal.capture_order.side_effect = PayPalError("PayPal request failed (422)", issue="INSTRUMENT_DECLINED")

    with pytest.raises(PayPalError):
        capture_credit_order(db_session, fake_paypal, "ORDER-1", test_account.id)

    fake_paypal.get_order.assert_not_called()
    assert _balance(db_session, test_account.id) == 10


def test_paypal_error_carries_issue():
    token_response = MagicMock(ok=True)
    token_response.json.return_value = {"access_token": "tok"}
    capture_response = MagicMock(ok=False, status_code=422, text="UNPROCESSABLE_ENTITY")
    capture_response.json.return_value = {
        "name": "UNPROCESSABLE_ENTITY",
        "details": [{"issue": "ORDER_ALREADY_CAPTURED"}],
    }

    with patch('mainalysis.services.paypal_client.settings') as mock_settings:
        mock_settings.PAYPAL_CLIENT_ID = "client-id"
        mock_settings.PAYPAL_CLIENT_SECRET = "secret"
        mock_settings.PAYPAL_MODE = "sandbox"
        mock_settings.PAYPAL_TIMEOUT = 5
        with patch('mainalysis.services.paypal_client.requests.post') as mock_post:
            mock_post.side_effect = [token_response, capture_response]
            with pytest.raises(PayPalError) as exc_info:
                PayPalClient().capture_order("ORDER-1")

    assert exc_info.value.issue == "ORDER_ALREADY_CAPTURED"
