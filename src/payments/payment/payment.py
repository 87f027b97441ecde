"""Payment aggregate: the record of a confirmed charge.

One Payment per gateway reference. It is written once, by the confirmation
handler, after stock has been settled, and is read by admin reporting. Its
existence is also the idempotency guard for repeated webhook deliveries.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from payments.domain import payments
from payments.payment.events import PaymentConfirmed


class PaymentStatus(Enum):
    SETTLED = "Settled"
    SETTLED_WITH_WARNING = "Settled_With_Warning"


@payments.aggregate
class Payment:
    reference = Identifier(identifier=True, required=True)
    email = String(max_length=254)
    phone = String(max_length=50)
    amount = Integer(default=0)  # minor units
    amount_ghs = Float(default=0.0)
    currency = String(max_length=3, default="GHS")
    channel = String(max_length=50)
    items = Text(required=True)  # JSON list of {product_id, qty}
    status = String(choices=PaymentStatus, default=PaymentStatus.SETTLED.value)
    deleted_products = Integer(default=0)
    settlement_warning = String(max_length=500)
    paid_at = DateTime()
    recorded_at = DateTime()

    @classmethod
    def record(
        cls,
        reference: str,
        items: list[dict],
        amount: int,
        currency: str,
        email: str | None = None,
        phone: str | None = None,
        channel: str | None = None,
        paid_at: datetime | None = None,
        deleted_products: int = 0,
        settlement_warning: str | None = None,
    ):
        """Record a settled charge and raise PaymentConfirmed."""
        now = datetime.now(UTC)
        manifest = json.dumps(items)
        status = PaymentStatus.SETTLED_WITH_WARNING if settlement_warning else PaymentStatus.SETTLED

        payment = cls(
            reference=reference,
            email=email,
            phone=phone,
            amount=amount,
            amount_ghs=float(Decimal(amount) / 100),
            currency=currency,
            channel=channel,
            items=manifest,
            status=status.value,
            deleted_products=deleted_products,
            settlement_warning=settlement_warning,
            paid_at=paid_at or now,
            recorded_at=now,
        )
        payment.raise_(
            PaymentConfirmed(
                reference=reference,
                email=email,
                amount=amount,
                currency=currency,
                items=manifest,
                deleted_products=deleted_products,
                settlement_warning=settlement_warning,
                confirmed_at=now,
            )
        )
        return payment

    @property
    def purchase_items(self) -> list[dict]:
        return json.loads(self.items) if self.items else []
