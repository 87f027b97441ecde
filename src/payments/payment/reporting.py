"""Admin reporting over recorded payments."""

from collections import defaultdict
from datetime import UTC, datetime

from protean.utils.globals import current_domain

from payments.payment.payment import Payment

RECENT_PAYMENTS_LIMIT = 500
REPORT_SCAN_LIMIT = 10_000


def _payment_row(payment: Payment) -> dict:
    return {
        "reference": payment.reference,
        "email": payment.email,
        "phone": payment.phone,
        "amount": payment.amount,
        "amount_ghs": payment.amount_ghs,
        "currency": payment.currency,
        "channel": payment.channel,
        "status": payment.status,
        "items": payment.purchase_items,
        "deleted_products": payment.deleted_products,
        "settlement_warning": payment.settlement_warning,
        "paid_at": payment.paid_at.isoformat() if payment.paid_at else None,
    }


def _paid_at(payment: Payment) -> datetime:
    moment = payment.paid_at or payment.recorded_at
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def _all_payments() -> list[Payment]:
    """Newest first, capped at REPORT_SCAN_LIMIT rows."""
    query = current_domain.repository_for(Payment)._dao.query
    return query.order_by("-paid_at").limit(REPORT_SCAN_LIMIT).all().items


def recent_payments(limit: int = RECENT_PAYMENTS_LIMIT) -> list[dict]:
    """Most recent payments first."""
    return [_payment_row(p) for p in _all_payments()[:limit]]


def monthly_totals() -> list[dict]:
    """Amount collected per calendar month (YYYY-MM), newest month first."""
    totals: dict[str, dict] = defaultdict(lambda: {"amount_ghs": 0.0, "payments": 0})
    for payment in _all_payments():
        month = totals[_paid_at(payment).strftime("%Y-%m")]
        month["amount_ghs"] += payment.amount_ghs or 0.0
        month["payments"] += 1
    return [
        {"month": month, "amount_ghs": round(values["amount_ghs"], 2), "payments": values["payments"]}
        for month, values in sorted(totals.items(), reverse=True)
    ]


def purchasers() -> list[dict]:
    """Buyers grouped by email, biggest spenders first."""
    buyers: dict[str, dict] = {}
    for payment in _all_payments():
        email = (payment.email or "").strip().lower()
        if not email:
            continue
        buyer = buyers.setdefault(
            email,
            {"email": email, "phone": payment.phone, "orders": 0, "amount_ghs": 0.0, "last_paid_at": None},
        )
        buyer["orders"] += 1
        buyer["amount_ghs"] = round(buyer["amount_ghs"] + (payment.amount_ghs or 0.0), 2)
        if buyer["last_paid_at"] is None:
            # payments arrive newest first
            buyer["last_paid_at"] = _paid_at(payment).isoformat()
    return sorted(buyers.values(), key=lambda b: (-b["amount_ghs"], b["email"]))
