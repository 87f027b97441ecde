"""Product field rules shared by the admin console and the storefront."""

import re
from decimal import Decimal, InvalidOperation

from protean.exceptions import ValidationError

from catalogue.media import get_object_store
from catalogue.store.port import Category
from shared.config import get_settings

PLACEHOLDER_IMAGE = "/images/products/placeholder.jpg"

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def parse_category(value) -> str:
    """Return the category value, or raise ValidationError for an unknown one."""
    raw = str(value or "").strip()
    try:
        return Category(raw).value
    except ValueError:
        allowed = ", ".join(c.value for c in Category)
        raise ValidationError({"category": [f"Unknown category '{raw}'. Expected one of: {allowed}"]}) from None


def parse_price(value) -> Decimal:
    try:
        price = Decimal(str(value if value is not None else 0)).quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError({"price_ghs": ["Price must be a number"]}) from None
    if not price.is_finite() or price < 0:
        raise ValidationError({"price_ghs": ["Price must not be negative"]})
    return price


def parse_stock(value) -> int:
    try:
        stock = Decimal(str(value if value is not None else 0))
    except InvalidOperation:
        raise ValidationError({"stock": ["Stock must be a whole number"]}) from None
    if not stock.is_finite() or stock != stock.to_integral_value():
        raise ValidationError({"stock": ["Stock must be a whole number"]})
    if stock < 0:
        raise ValidationError({"stock": ["Stock must not be negative"]})
    return int(stock)


def slugify(text: str) -> str:
    return _SLUG_STRIP.sub("-", text.lower()).strip("-")


def resolve_image_url(image_ref: str | None) -> str:
    """Turn a stored image reference into a URL a browser can load.

    Absolute URLs pass through. Storage paths may carry a leading slash or a
    redundant bucket prefix; both are stripped before resolution.
    """
    if not image_ref or not image_ref.strip():
        return PLACEHOLDER_IMAGE

    ref = image_ref.strip()
    if ref.startswith(("http://", "https://")):
        return ref

    bucket = get_settings().image_bucket
    path = ref.lstrip("/")
    if path.startswith(f"{bucket}/"):
        path = path[len(bucket) + 1 :].lstrip("/")
    return get_object_store().public_url(path) or PLACEHOLDER_IMAGE
