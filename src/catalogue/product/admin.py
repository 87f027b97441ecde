"""Admin product management: upload, edit, delete.

Uploads write the image first and the row second; a row that fails to insert
takes its freshly uploaded image with it. Deletes remove the row first and the
image second; a failed image removal is reported as a warning because the row,
which is what the storefront shows, is already gone.
"""

from dataclasses import dataclass
from uuid import uuid4

import structlog
from protean.exceptions import ValidationError

from catalogue.media import get_object_store
from catalogue.media.port import ObjectStoreError
from catalogue.product.product import (
    parse_category,
    parse_price,
    parse_stock,
    resolve_image_url,
    slugify,
)
from catalogue.store import get_catalog_store
from catalogue.store.port import CatalogStoreError, ProductRecord
from shared.exceptions import ProductNotFoundError, StorefrontError

logger = structlog.get_logger(__name__)

ADMIN_LISTING_LIMIT = 1000


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    data: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        _, dot, ext = self.filename.rpartition(".")
        ext = ext.strip().lower() if dot else ""
        return ext if ext.isalnum() else "jpg"


def _to_admin_item(product: ProductRecord) -> dict:
    item = product.to_dict()
    item["image_url"] = resolve_image_url(product.image_path)
    return item


def upload_product(
    name: str,
    category: str,
    price_ghs,
    stock,
    image: ImageUpload | None,
    slug: str | None = None,
    description: str | None = None,
) -> dict:
    name = (name or "").strip()
    if not name:
        raise ValidationError({"name": ["Product name is required"]})
    if image is None or not image.data:
        raise ValidationError({"file": ["Missing file"]})

    category = parse_category(category)
    price = parse_price(price_ghs)
    stock = parse_stock(stock)

    product_id = str(uuid4())
    image_path = f"products/{product_id}.{image.extension}"

    object_store = get_object_store()
    try:
        object_store.upload(image_path, image.data, image.content_type or "image/jpeg")
    except ObjectStoreError as exc:
        logger.error("admin.image_upload_failed", product_id=product_id, error=str(exc))
        raise StorefrontError(f"Image upload failed: {exc}") from exc

    product = ProductRecord(
        id=product_id,
        name=name,
        slug=(slug or "").strip() or slugify(name),
        description=(description or "").strip() or None,
        category=category,
        price_ghs=price,
        stock=stock,
        is_active=True,
        image_path=image_path,
    )
    try:
        get_catalog_store().add_product(product)
    except CatalogStoreError as exc:
        logger.error("admin.product_insert_failed", product_id=product_id, error=str(exc))
        try:
            object_store.remove([image_path])
        except ObjectStoreError as cleanup_exc:
            logger.warning("admin.orphaned_image", image_path=image_path, error=str(cleanup_exc))
        raise StorefrontError(f"Could not save product: {exc}") from exc

    logger.info("admin.product_uploaded", product_id=product_id, category=category, stock=stock)
    return _to_admin_item(product)


_NON_NULLABLE = ("category", "price_ghs", "stock")


def update_product(product_id: str, patch: dict) -> dict:
    nulls = {field: [f"{field} cannot be null"] for field in _NON_NULLABLE if field in patch and patch[field] is None}
    if nulls:
        raise ValidationError(nulls)

    changes = {}
    if "name" in patch:
        name = (patch["name"] or "").strip()
        if not name:
            raise ValidationError({"name": ["Product name is required"]})
        changes["name"] = name
    if "slug" in patch:
        changes["slug"] = (patch["slug"] or "").strip() or None
    if "category" in patch:
        changes["category"] = parse_category(patch["category"])
    if "price_ghs" in patch:
        changes["price_ghs"] = parse_price(patch["price_ghs"])
    if "stock" in patch:
        changes["stock"] = parse_stock(patch["stock"])
    if "is_active" in patch:
        if not isinstance(patch["is_active"], bool):
            raise ValidationError({"is_active": ["is_active must be true or false"]})
        changes["is_active"] = patch["is_active"]

    if not changes:
        raise ValidationError({"patch": ["Nothing to update"]})

    try:
        product = get_catalog_store().update_product(product_id, **changes)
    except CatalogStoreError as exc:
        raise StorefrontError(f"Update failed: {exc}") from exc
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} not found")

    logger.info("admin.product_updated", product_id=product_id, fields=sorted(changes))
    return _to_admin_item(product)


def delete_product(product_id: str) -> dict:
    store = get_catalog_store()
    product = store.get_product(product_id)
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} not found")

    try:
        store.delete_products([product_id])
    except CatalogStoreError as exc:
        raise StorefrontError(f"Delete failed: {exc}") from exc

    result = {"ok": True, "deleted": 1}
    if product.image_path and not product.image_path.startswith(("http://", "https://")):
        try:
            get_object_store().remove([product.image_path])
        except ObjectStoreError as exc:
            logger.warning("admin.image_cleanup_failed", product_id=product_id, error=str(exc))
            result["warning"] = "Product deleted but image removal failed"
            result["storage_error"] = str(exc)

    logger.info("admin.product_deleted", product_id=product_id)
    return result


def list_all_products(limit: int = ADMIN_LISTING_LIMIT) -> list[dict]:
    """Every product including inactive and sold-out ones, newest first."""
    products = get_catalog_store().list_products(active_only=False, in_stock_only=False, limit=limit)
    return [_to_admin_item(p) for p in products]
