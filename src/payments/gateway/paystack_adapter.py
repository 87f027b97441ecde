"""Paystack payment gateway adapter.

Talks to the Paystack REST API over httpx. Failures never raise: transport
errors, non-2xx answers and bodies without an authorization URL all come back
as an unsuccessful TransactionResult carrying the provider's message.
"""

import httpx
import structlog

from payments.gateway.port import PaymentGateway, TransactionResult
from payments.gateway.signing import signature_matches

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.paystack.co"


class PaystackGateway(PaymentGateway):
    """Production Paystack gateway adapter."""

    def __init__(
        self,
        secret_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self.secret_key}",
                "Content-Type": "application/json",
            },
        )

    def initialize_transaction(
        self,
        email: str,
        amount: int,
        currency: str,
        channels: list[str],
        metadata: dict,
        callback_url: str | None = None,
    ) -> TransactionResult:
        payload = {
            "email": email,
            "amount": amount,
            "currency": currency,
            "channels": channels,
            "metadata": metadata,
        }
        if callback_url:
            payload["callback_url"] = callback_url

        try:
            with self._client() as client:
                response = client.post("/transaction/initialize", json=payload)
        except httpx.HTTPError as exc:
            logger.error("paystack.transport_error", error=str(exc))
            return TransactionResult(success=False, message="Payment provider unreachable", details={"error": str(exc)})

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        data = body.get("data") if isinstance(body.get("data"), dict) else {}
        authorization_url = data.get("authorization_url")
        if response.is_error or not body.get("status") or not authorization_url:
            message = body.get("message") or "Paystack initialize failed"
            logger.warning("paystack.initialize_failed", status_code=response.status_code, message=message)
            return TransactionResult(success=False, message=message, details=body or {"status_code": response.status_code})

        return TransactionResult(
            success=True,
            authorization_url=authorization_url,
            reference=data.get("reference"),
            access_code=data.get("access_code"),
            message=body.get("message"),
        )

    def verify_webhook_signature(self, raw_body: bytes, signature: str | None) -> bool:
        return signature_matches(self.secret_key, raw_body, signature)
