"""Inventory settlement: decrement stock after a confirmed payment.

Order of effects:
    atomic decrement-and-classify -> delete exhausted rows -> delete their images

Only the first step can fail the settlement. Later steps never unwind earlier
ones: a failure there is logged and reported as a warning alongside success,
since an orphaned image or a zero-stock row is preferable to replaying a
charge that has already moved stock.
"""

from dataclasses import dataclass, field

import structlog
from protean.exceptions import ValidationError

from catalogue.media import get_object_store
from catalogue.media.port import ObjectStoreError
from catalogue.store import get_catalog_store
from catalogue.store.port import (
    CatalogStoreError,
    DuplicateSettlementError,
    ExhaustedProduct,
    PurchaseItem,
)
from shared.exceptions import SettlementError

logger = structlog.get_logger(__name__)


@dataclass
class SettlementResult:
    deleted: int = 0
    exhausted: list[ExhaustedProduct] = field(default_factory=list)
    warning: str | None = None
    storage_error: str | None = None
    duplicate: bool = False

    def to_dict(self) -> dict:
        result = {"ok": True, "deleted": self.deleted}
        if self.duplicate:
            result["duplicate"] = True
        if self.warning:
            result["warning"] = self.warning
        if self.storage_error:
            result["storage_error"] = self.storage_error
        return result


def coerce_purchase_items(items) -> list[PurchaseItem]:
    """Read a purchase manifest ({product_id, qty} dicts or PurchaseItems)."""
    if not isinstance(items, list | tuple) or not items:
        raise ValidationError({"items": ["Missing items"]})

    purchase_items = []
    for raw in items:
        if isinstance(raw, PurchaseItem):
            purchase_items.append(raw)
            continue
        if not isinstance(raw, dict):
            raise ValidationError({"items": ["Each item must be an object with product_id and qty"]})

        product_id = str(raw.get("product_id") or "").strip()
        if not product_id:
            raise ValidationError({"items": ["Every item needs a product_id"]})
        try:
            qty = int(raw.get("qty") or 1)
        except (TypeError, ValueError):
            raise ValidationError({"items": [f"Invalid qty for product {product_id}"]}) from None
        purchase_items.append(PurchaseItem(product_id=product_id, qty=max(1, qty)))
    return purchase_items


def settle_inventory(items, reference: str | None = None) -> SettlementResult:
    """Apply a purchase to the catalogue and retire sold-out products.

    Raises:
        ValidationError: the manifest is empty or malformed.
        SettlementError: the atomic decrement failed; no stock moved, no rows deleted.
    """
    purchase_items = coerce_purchase_items(items)
    store = get_catalog_store()

    try:
        exhausted = store.settle_stock(purchase_items, reference=reference)
    except DuplicateSettlementError:
        logger.info("settlement.duplicate", reference=reference)
        return SettlementResult(duplicate=True)
    except CatalogStoreError as exc:
        logger.error("settlement.decrement_failed", reference=reference, error=str(exc))
        raise SettlementError(f"Stock settlement failed: {exc}") from exc

    result = SettlementResult(exhausted=exhausted)
    if not exhausted:
        logger.info("settlement.completed", reference=reference, items=len(purchase_items), deleted=0)
        return result

    product_ids = [e.product_id for e in exhausted]
    try:
        deleted_ids = set(store.delete_exhausted(product_ids))
    except CatalogStoreError as exc:
        logger.error("settlement.row_cleanup_failed", reference=reference, product_ids=product_ids, error=str(exc))
        result.warning = "Stock settled but sold-out products could not be removed"
        return result
    result.deleted = len(deleted_ids)

    # restocked rows keep their image; absolute URLs point outside the object store
    paths = [
        e.image_path
        for e in exhausted
        if e.product_id in deleted_ids and e.image_path and not e.image_path.startswith(("http://", "https://"))
    ]
    if paths:
        try:
            get_object_store().remove(paths)
        except ObjectStoreError as exc:
            logger.warning("settlement.image_cleanup_failed", reference=reference, paths=paths, error=str(exc))
            result.warning = "Product deleted but image removal failed"
            result.storage_error = str(exc)

    logger.info("settlement.completed", reference=reference, items=len(purchase_items), deleted=result.deleted)
    return result
