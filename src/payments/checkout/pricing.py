"""Charge computation for checkout.

Money is Decimal throughout. Prices come from the client cart and only decide
how much the buyer is charged; settlement works from product ids and
quantities alone.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from catalogue.store.port import PurchaseItem

MINIMUM_CHARGE_GHS = Decimal("2")

_ZERO = Decimal("0")


def _number(value) -> Decimal:
    if isinstance(value, bool) or value is None:
        return _ZERO
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return _ZERO
    return number if number.is_finite() else _ZERO


def calculate_total_ghs(items: list[dict]) -> Decimal:
    """Sum of price x qty per line; negative prices or quantities contribute nothing."""
    total = _ZERO
    for item in items:
        price = max(_ZERO, _number(item.get("price_ghs")))
        qty = max(_ZERO, _number(item.get("qty")))
        total += price * qty
    return total


def chargeable_total(total_ghs: Decimal) -> Decimal:
    return max(total_ghs, MINIMUM_CHARGE_GHS)


def to_minor_units(total_ghs: Decimal) -> int:
    """Pesewas, rounding half away from zero."""
    return int((total_ghs * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_purchase_items(items: list[dict]) -> list[PurchaseItem]:
    """Trusted manifest for the gateway: product id and qty, nothing else."""
    purchase_items = []
    for item in items:
        product_id = str(item.get("id") or "").strip()
        if not product_id:
            continue
        qty = int(_number(item.get("qty")))
        purchase_items.append(PurchaseItem(product_id=product_id, qty=max(1, qty)))
    return purchase_items
