"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and PaystackGateway
(production) without changing any checkout or confirmation code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TransactionResult:
    """Result of a transaction initialization request."""

    success: bool
    authorization_url: str | None = None
    reference: str | None = None
    access_code: str | None = None
    message: str | None = None
    details: dict = field(default_factory=dict)


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def initialize_transaction(
        self,
        email: str,
        amount: int,
        currency: str,
        channels: list[str],
        metadata: dict,
        callback_url: str | None = None,
    ) -> TransactionResult:
        """Open a hosted payment session for `amount` minor units."""
        ...

    @abstractmethod
    def verify_webhook_signature(
        self,
        raw_body: bytes,
        signature: str | None,
    ) -> bool:
        """Verify that a webhook body, byte for byte, is authentically from the gateway."""
        ...
