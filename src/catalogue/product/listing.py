"""Public catalogue queries for the storefront."""

from catalogue.product.product import parse_category, resolve_image_url
from catalogue.store import get_catalog_store
from catalogue.store.port import ProductRecord

MAX_LISTING = 200


def to_storefront_item(product: ProductRecord) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "category": product.category,
        "price_ghs": float(product.price_ghs),
        "stock": product.stock,
        "image_url": resolve_image_url(product.image_path),
    }


def list_category(category, limit: int | None = None) -> list[dict]:
    """Active, in-stock products of one category, newest first."""
    category = parse_category(category)
    limit = MAX_LISTING if limit is None else max(1, min(limit, MAX_LISTING))
    products = get_catalog_store().list_products(category=category, active_only=True, in_stock_only=True, limit=limit)
    return [to_storefront_item(p) for p in products]


def get_listed_product(product_id: str) -> dict | None:
    """A single product as the storefront shows it, or None if it is not purchasable."""
    product = get_catalog_store().get_product(product_id)
    if product is None or not product.is_active or product.stock <= 0:
        return None
    return to_storefront_item(product)
