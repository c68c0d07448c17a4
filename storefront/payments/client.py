"""
Passerelles de paiement utilisées par le checkout.

- LocalPushPaymentGateway: appelle le service en process (Daraja direct)
- RemotePushPaymentGateway: POST vers la fonction hébergée (PUSH_PAYMENT_URL)
Les deux retournent un PaymentRequestResult; seules les erreurs de transport
(httpx.HTTPError) remontent à l'appelant.
"""
import logging
from typing import Optional, Protocol

import httpx

from storefront import config
from . import service
from .models import PaymentRequestResult

logger = logging.getLogger(__name__)


class PushPaymentGateway(Protocol):
    def request_push_payment(self, phone_number: str, amount: int) -> PaymentRequestResult: ...


class LocalPushPaymentGateway:
    def request_push_payment(self, phone_number: str, amount: int) -> PaymentRequestResult:
        return service.initiate_push_payment(phone_number, amount)


class RemotePushPaymentGateway:
    def __init__(self, url: str, api_key: str = "", timeout: Optional[float] = None, client: Optional[httpx.Client] = None):
        self.url = url
        self.api_key = api_key
        # None: pas de timeout local, la fonction distante fait foi
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    def request_push_payment(self, phone_number: str, amount: int) -> PaymentRequestResult:
        body = {"phoneNumber": phone_number, "amount": amount}
        if self._client is not None:
            response = self._client.post(self.url, json=body, headers=self._headers(), timeout=self.timeout)
        else:
            response = httpx.post(self.url, json=body, headers=self._headers(), timeout=self.timeout)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_success and data.get("success"):
            return PaymentRequestResult.model_validate(data)
        logger.warning("payments.client.remote failed status=%s error=%s", response.status_code, data.get("error"))
        return PaymentRequestResult(
            success=False,
            error=data.get("error") or data.get("message") or service.FAILURE_MESSAGE,
        )


def get_push_payment_gateway() -> PushPaymentGateway:
    """Dépendance FastAPI: passerelle distante si PUSH_PAYMENT_URL est défini, sinon locale."""
    if config.PUSH_PAYMENT_URL:
        return RemotePushPaymentGateway(
            url=config.PUSH_PAYMENT_URL,
            api_key=config.SUPABASE_ANON,
            timeout=config.PUSH_PAYMENT_TIMEOUT,
        )
    return LocalPushPaymentGateway()
