"""Payment confirmation: the gateway's signed callback.

Order of checks:
    signature over the raw bytes -> JSON -> event type -> item manifest -> recorded payment

Nothing is parsed before the signature matches, and only "charge.success"
events reach ConfirmPayment. The handler settles stock keyed by the gateway
reference, so a redelivered event is acknowledged without moving stock twice.
"""

import json
from dataclasses import dataclass
from datetime import datetime

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.inventory.settlement import coerce_purchase_items, settle_inventory
from payments.domain import payments
from payments.gateway import get_gateway
from payments.payment.payment import Payment
from shared.exceptions import AuthenticationError, MalformedEventError

logger = structlog.get_logger(__name__)

CHARGE_SUCCESS = "charge.success"
ALREADY_SETTLED_WARNING = "Stock was already settled for this reference"


@dataclass(frozen=True)
class ConfirmationOutcome:
    acknowledged: bool = True
    event_type: str | None = None
    reference: str | None = None
    settled: bool = False
    duplicate: bool = False
    deleted: int = 0
    warning: str | None = None

    def to_dict(self) -> dict:
        result = {"ok": self.acknowledged, "event": self.event_type, "settled": self.settled, "deleted": self.deleted}
        if self.reference:
            result["reference"] = self.reference
        if self.duplicate:
            result["duplicate"] = True
        if self.warning:
            result["warning"] = self.warning
        return result


def _is_recorded(reference: str) -> bool:
    try:
        current_domain.repository_for(Payment).get(reference)
    except ObjectNotFoundError:
        return False
    return True


def _duplicate_outcome(reference: str) -> ConfirmationOutcome:
    return ConfirmationOutcome(event_type=CHARGE_SUCCESS, reference=reference, duplicate=True)


@payments.command(part_of="Payment")
class ConfirmPayment:
    """Settle stock for a charge the gateway confirmed."""

    reference = Identifier(required=True)
    email = String(max_length=254)
    amount = Integer(default=0)
    currency = String(max_length=3, default="GHS")
    channel = String(max_length=50)
    phone = String(max_length=50)
    items = Text(required=True)  # JSON list of {product_id, qty}
    paid_at = DateTime()


@payments.command_handler(part_of=Payment)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        items = json.loads(command.items)
        settlement = settle_inventory(items, reference=command.reference)

        # the store claim is the only lock; read the repository after it
        repo = current_domain.repository_for(Payment)
        if settlement.duplicate and _is_recorded(command.reference):
            logger.info("payment.duplicate_confirmation", reference=command.reference)
            return _duplicate_outcome(command.reference)
        warning = ALREADY_SETTLED_WARNING if settlement.duplicate else settlement.warning

        payment = Payment.record(
            reference=command.reference,
            items=items,
            amount=command.amount or 0,
            currency=command.currency or "GHS",
            email=command.email,
            phone=command.phone,
            channel=command.channel,
            paid_at=command.paid_at,
            deleted_products=settlement.deleted,
            settlement_warning=warning,
        )
        repo.add(payment)

        logger.info(
            "payment.confirmed",
            reference=command.reference,
            amount=command.amount,
            deleted=settlement.deleted,
            warning=warning,
        )
        return ConfirmationOutcome(
            event_type=CHARGE_SUCCESS,
            reference=command.reference,
            settled=not settlement.duplicate,
            duplicate=settlement.duplicate,
            deleted=settlement.deleted,
            warning=warning,
        )


def _parse_timestamp(value) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def handle_payment_event(raw_body: bytes, signature: str | None) -> ConfirmationOutcome:
    """Verify, parse and dispatch one gateway callback.

    Raises:
        AuthenticationError: the signature does not match the raw body.
        MalformedEventError: the body is not JSON, or a charge event carries no manifest.
    """
    if not get_gateway().verify_webhook_signature(raw_body, signature):
        logger.warning("payment.webhook_rejected", reason="signature_mismatch", size=len(raw_body))
        raise AuthenticationError("Invalid signature")

    try:
        event = json.loads(raw_body)
    except ValueError:
        raise MalformedEventError("Event body is not valid JSON") from None
    if not isinstance(event, dict):
        raise MalformedEventError("Event body is not an object")

    event_type = event.get("event")
    if event_type != CHARGE_SUCCESS:
        logger.info("payment.event_ignored", event_type=event_type)
        return ConfirmationOutcome(event_type=event_type)

    data = event.get("data") if isinstance(event.get("data"), dict) else {}
    metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}
    raw_items = metadata.get("items")
    if not isinstance(raw_items, list):
        raise MalformedEventError("Missing items in event metadata")
    try:
        purchase_items = coerce_purchase_items(raw_items)
    except ValidationError as exc:
        raise MalformedEventError("Invalid items in event metadata", messages=exc.messages) from None

    reference = str(data.get("reference") or "").strip()
    if not reference:
        raise MalformedEventError("Event carries no payment reference")
    if _is_recorded(reference):
        logger.info("payment.duplicate_confirmation", reference=reference)
        return _duplicate_outcome(reference)

    customer = data.get("customer") if isinstance(data.get("customer"), dict) else {}
    amount = data.get("amount")
    command = ConfirmPayment(
        reference=reference,
        email=customer.get("email"),
        amount=amount if isinstance(amount, int) and not isinstance(amount, bool) else 0,
        currency=data.get("currency") or "GHS",
        channel=data.get("channel"),
        phone=metadata.get("phone"),
        items=json.dumps([p.to_dict() for p in purchase_items]),
        paid_at=_parse_timestamp(data.get("paid_at")),
    )
    return current_domain.process(command, asynchronous=False)
