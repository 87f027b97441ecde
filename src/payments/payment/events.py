"""Domain events for the Payment aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from payments.domain import payments


@payments.event(part_of="Payment")
class PaymentConfirmed:
    """A charge was confirmed by the gateway and its stock settled."""

    __version__ = 1

    reference = Identifier(required=True)
    email = String()
    amount = Integer(required=True)
    currency = String(required=True)
    items = Text(required=True)  # JSON list of {product_id, qty}
    deleted_products = Integer(default=0)
    settlement_warning = String()
    confirmed_at = DateTime(required=True)
