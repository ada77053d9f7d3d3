"""
Cliente REST do PayPal (Orders v2): criação e captura de orders
"""
import logging
from typing import Any, Dict, Optional
import requests
from mainalysis.config import settings
from mainalysis.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PAYPAL_LIVE_URL = "https://api-m.paypal.com"
PAYPAL_SANDBOX_URL = "https://api-m.sandbox.paypal.com"


class PayPalError(Exception):
    """Erro de comunicação ou resposta não-2xx do PayPal"""

    def __init__(self, message: str, issue: Optional[str] = None):
        super().__init__(message)
        self.issue = issue  # ex: ORDER_ALREADY_CAPTURED


def _error_issue(response: requests.Response) -> Optional[str]:
    """Primeiro `details[].issue` do corpo de erro do PayPal, se houver."""
    try:
        details = response.json().get("details") or []
    except (ValueError, AttributeError):
        return None
    if details and isinstance(details[0], dict):
        return details[0].get("issue")
    return None


class PayPalClient:

    def __init__(self):
        self.client_id = settings.PAYPAL_CLIENT_ID
        self.client_secret = settings.PAYPAL_CLIENT_SECRET
        self.base_url = PAYPAL_LIVE_URL if settings.PAYPAL_MODE == "live" else PAYPAL_SANDBOX_URL
        self.timeout = settings.PAYPAL_TIMEOUT

    def get_access_token(self) -> str:
        """Obtém access token via client credentials."""
        if not self.client_id or not self.client_secret:
            raise ConfigurationError("PayPal credentials not configured")

        try:
            response = requests.post(
                f"{self.base_url}/v1/oauth2/token",
                auth=(self.client_id, self.client_secret),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                data={"grant_type": "client_credentials"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"paypal_token_fail: {e}")
            raise PayPalError(f"Failed to get PayPal access token: {e}")

        if not response.ok:
            logger.error(f"paypal_token_fail: {response.status_code}")
            raise PayPalError(f"Failed to get PayPal access token: {response.text}")

        return response.json()["access_token"]

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.get_access_token()}",
            "Content-Type": "application/json",
        }

    def _handle_response(self, path: str, response: requests.Response) -> Dict[str, Any]:
        if not response.ok:
            logger.error(f"paypal_request_fail: {path}: {response.status_code}")
            raise PayPalError(
                f"PayPal request failed ({response.status_code}): {response.text}",
                issue=_error_issue(response),
            )
        return response.json()

    def _post(self, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        headers = self._auth_headers()
        try:
            response = requests.post(
                f"{self.base_url}{path}",
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"paypal_request_fail: {path}: {e}")
            raise PayPalError(f"PayPal request failed: {e}")

        return self._handle_response(path, response)

    def _get(self, path: str) -> Dict[str, Any]:
        headers = self._auth_headers()
        try:
            response = requests.get(f"{self.base_url}{path}", headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"paypal_request_fail: {path}: {e}")
            raise PayPalError(f"PayPal request failed: {e}")

        return self._handle_response(path, response)

    def create_order(
        self,
        amount: str,
        description: str,
        custom_id: str,
        return_url: str,
        cancel_url: str,
    ) -> Dict[str, Any]:
        """
        Cria uma order com intent CAPTURE.

        Args:
            amount: Valor com duas casas decimais (ex: "25.00")
            description: Descrição exibida ao comprador
            custom_id: ID da conta que receberá os créditos
        """
        return self._post("/v2/checkout/orders", {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "amount": {
                        "currency_code": settings.PAYPAL_CURRENCY,
                        "value": amount,
                    },
                    "description": description,
                    "custom_id": custom_id,
                }
            ],
            "application_context": {
                "brand_name": settings.PAYPAL_BRAND_NAME,
                "landing_page": "NO_PREFERENCE",
                "user_action": "PAY_NOW",
                "return_url": return_url,
                "cancel_url": cancel_url,
            },
        })

    def capture_order(self, order_id: str) -> Dict[str, Any]:
        return self._post(f"/v2/checkout/orders/{order_id}/capture")

    def get_order(self, order_id: str) -> Dict[str, Any]:
        """Detalhes da order, incluindo as capturas já feitas."""
        return self._get(f"/v2/checkout/orders/{order_id}")


_client_instance: Optional[PayPalClient] = None


def get_paypal_client() -> PayPalClient:
    global _client_instance
    if _client_instance is None:
        _client_instance = PayPalClient()
    return _client_instance
