"""Configurable fake payment gateway for development and testing.

This adapter simulates the payment provider without any external calls.
It can be configured at runtime to succeed or fail, and it signs and
verifies webhook bodies with the same HMAC helper as the real adapter, so
tests can post signed events exactly as the provider would.
"""

from itertools import count

from payments.gateway.port import PaymentGateway, TransactionResult
from payments.gateway.signing import sign_payload, signature_matches

TEST_SECRET = "sk_test_fake_gateway"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, secret: str = TEST_SECRET) -> None:
        self.secret = secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Transaction could not be initialized"
        self.calls: list[dict] = []
        self._sequence = count(1)

    def configure(self, should_succeed: bool, failure_reason: str = "Transaction could not be initialized") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def initialize_transaction(
        self,
        email: str,
        amount: int,
        currency: str,
        channels: list[str],
        metadata: dict,
        callback_url: str | None = None,
    ) -> TransactionResult:
        call = {
            "method": "initialize_transaction",
            "email": email,
            "amount": amount,
            "currency": currency,
            "channels": channels,
            "metadata": metadata,
            "callback_url": callback_url,
        }
        self.calls.append(call)

        if self.should_succeed:
            reference = f"fake_ref_{next(self._sequence):06d}"
            return TransactionResult(
                success=True,
                authorization_url=f"https://checkout.fake-gateway.test/{reference}",
                reference=reference,
                access_code=f"fake_access_{reference[-6:]}",
                message="Authorization URL created",
            )
        return TransactionResult(
            success=False,
            message=self.failure_reason,
            details={"status": False, "message": self.failure_reason},
        )

    def sign(self, raw_body: bytes) -> str:
        """Signature the provider would send with `raw_body`."""
        return sign_payload(self.secret, raw_body)

    def verify_webhook_signature(self, raw_body: bytes, signature: str | None) -> bool:
        return signature_matches(self.secret, raw_body, signature)
