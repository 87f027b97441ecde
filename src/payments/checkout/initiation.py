"""Checkout initiation: command and handler.

Validates the cart, prices it and opens a hosted payment session with the
gateway. Nothing is written locally; stock only moves once the gateway
confirms the charge.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String, Text

from payments.checkout.phone import normalize_ghana_phone
from payments.checkout.pricing import (
    calculate_total_ghs,
    chargeable_total,
    to_minor_units,
    to_purchase_items,
)
from payments.domain import payments
from payments.gateway import get_gateway
from payments.gateway.paystack_adapter import PaystackGateway
from payments.payment.payment import Payment
from shared.config import get_settings
from shared.exceptions import ConfigurationError, GatewayError

logger = structlog.get_logger(__name__)

PAYMENT_CHANNELS = ["mobile_money"]


@payments.command(part_of="Payment")
class InitiateCheckout:
    """Open a payment session for a cart."""

    email = String(max_length=254)
    phone = String(max_length=50)
    items = Text()  # JSON list of {id, name?, price_ghs, qty}


def _load_items(raw: str | None) -> list[dict]:
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except ValueError:
        raise ValidationError({"items": ["Cart items must be a list"]}) from None
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise ValidationError({"items": ["Cart items must be a list"]})
    return items


@payments.command_handler(part_of=Payment)
class InitiateCheckoutHandler:
    @handle(InitiateCheckout)
    def initiate_checkout(self, command):
        email = (command.email or "").strip()
        phone = (command.phone or "").strip()
        items = _load_items(command.items)
        if not email or not phone or not items:
            raise ValidationError({"_entity": ["Missing required fields: email, items, phone"]})

        purchase_items = to_purchase_items(items)
        if not purchase_items:
            raise ValidationError({"_entity": ["Cart items missing product ids"]})

        gateway = get_gateway()
        if isinstance(gateway, PaystackGateway) and not gateway.secret_key:
            raise ConfigurationError("PAYSTACK_SECRET_KEY is not set in environment")

        settings = get_settings()
        total_ghs = calculate_total_ghs(items)
        amount = to_minor_units(chargeable_total(total_ghs))

        result = gateway.initialize_transaction(
            email=email,
            amount=amount,
            currency=settings.currency,
            channels=PAYMENT_CHANNELS,
            metadata={
                "phone": normalize_ghana_phone(phone),
                "items": [p.to_dict() for p in purchase_items],
                "source": settings.source_tag,
            },
            callback_url=settings.callback_url,
        )
        if not result.success or not result.authorization_url:
            logger.warning("checkout.gateway_rejected", message=result.message)
            raise GatewayError(result.message or "Paystack initialize failed", details=result.details)

        logger.info(
            "checkout.initialized",
            reference=result.reference,
            amount=amount,
            currency=settings.currency,
            items=len(purchase_items),
        )
        return {"authorization_url": result.authorization_url, "reference": result.reference}
