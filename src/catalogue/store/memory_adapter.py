"""In-memory catalog store for development and testing.

Rows live in a dict guarded by a single lock. Settlement holds the lock for
the whole decrement-and-classify pass, which makes it atomic with respect to
every other store operation in the process.
"""

import threading
from dataclasses import replace

from catalogue.store.port import (
    CatalogStore,
    CatalogStoreError,
    DuplicateSettlementError,
    ExhaustedProduct,
    ProductRecord,
    PurchaseItem,
)


class MemoryCatalogStore(CatalogStore):
    """Thread-safe in-memory catalog store."""

    def __init__(self) -> None:
        self._rows: dict[str, ProductRecord] = {}
        self._settled_references: set[str] = set()
        self._lock = threading.Lock()
        self.fail_settlement: bool = False
        self.fail_deletes: bool = False

    def configure(self, fail_settlement: bool = False, fail_deletes: bool = False) -> None:
        """Make settlement or batch deletes fail (useful for tests)."""
        self.fail_settlement = fail_settlement
        self.fail_deletes = fail_deletes

    def add_product(self, product: ProductRecord) -> ProductRecord:
        if product.stock < 0:
            raise CatalogStoreError("stock must not be negative")
        with self._lock:
            if product.id in self._rows:
                raise CatalogStoreError(f"Product {product.id} already exists")
            self._rows[product.id] = product
        return product

    def get_product(self, product_id: str) -> ProductRecord | None:
        with self._lock:
            return self._rows.get(product_id)

    def list_products(self, category=None, active_only=True, in_stock_only=True, limit=None):
        with self._lock:
            rows = list(self._rows.values())

        if category is not None:
            rows = [r for r in rows if r.category == category]
        if active_only:
            rows = [r for r in rows if r.is_active]
        if in_stock_only:
            rows = [r for r in rows if r.stock > 0]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return rows[:limit] if limit is not None else rows

    def update_product(self, product_id: str, **changes) -> ProductRecord | None:
        if changes.get("stock") is not None and changes["stock"] < 0:
            raise CatalogStoreError("stock must not be negative")
        with self._lock:
            current = self._rows.get(product_id)
            if current is None:
                return None
            updated = replace(current, **changes)
            self._rows[product_id] = updated
            return updated

    def delete_products(self, product_ids: list[str]) -> int:
        if self.fail_deletes:
            raise CatalogStoreError("Simulated delete failure")
        with self._lock:
            deleted = 0
            for product_id in set(product_ids):
                if self._rows.pop(product_id, None) is not None:
                    deleted += 1
            return deleted

    def delete_exhausted(self, product_ids: list[str]) -> list[str]:
        if self.fail_deletes:
            raise CatalogStoreError("Simulated delete failure")
        with self._lock:
            deleted = []
            for product_id in dict.fromkeys(product_ids):
                row = self._rows.get(product_id)
                if row is not None and row.stock <= 0:
                    del self._rows[product_id]
                    deleted.append(product_id)
            return deleted

    def settle_stock(self, items: list[PurchaseItem], reference: str | None = None) -> list[ExhaustedProduct]:
        with self._lock:
            if self.fail_settlement:
                raise CatalogStoreError("Simulated settlement failure")
            if reference is not None and reference in self._settled_references:
                raise DuplicateSettlementError(reference)

            exhausted: dict[str, ExhaustedProduct] = {}
            for item in items:
                row = self._rows.get(item.product_id)
                if row is None:
                    continue
                new_stock = max(0, row.stock - item.qty)
                self._rows[row.id] = replace(row, stock=new_stock)
                if new_stock <= 0:
                    exhausted[row.id] = ExhaustedProduct(product_id=row.id, image_path=row.image_path)

            if reference is not None:
                self._settled_references.add(reference)
            return list(exhausted.values())
