"""Catalog store port (abstract interface).

Defines the contract every catalog store adapter implements. The catalogue
and settlement code program against this port; MemoryCatalogStore serves
development and tests, SqlCatalogStore serves production.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum


class Category(Enum):
    """Storefront categories."""

    CLOTHES = "clothes"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    GIRL_DRESSES = "girl_dresses"
    GIRL_SHOES = "girl_shoes"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    Category.CLOTHES: "Clothes (Boys)",
    Category.SHOES: "Shoes (Boys)",
    Category.ACCESSORIES: "Accessories (Boys)",
    Category.GIRL_DRESSES: "Dresses (Girls)",
    Category.GIRL_SHOES: "Shoes (Girls)",
}


@dataclass(frozen=True)
class ProductRecord:
    """One row of the products table."""

    id: str
    name: str
    category: str
    price_ghs: Decimal
    stock: int
    slug: str | None = None
    description: str | None = None
    is_active: bool = True
    image_path: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "category": self.category,
            "price_ghs": float(self.price_ghs),
            "stock": self.stock,
            "is_active": self.is_active,
            "image_path": self.image_path,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class PurchaseItem:
    """Trusted purchase manifest entry: which product, how many.

    Never carries a price or a name.
    """

    product_id: str
    qty: int

    def to_dict(self) -> dict:
        return {"product_id": self.product_id, "qty": self.qty}


@dataclass(frozen=True)
class ExhaustedProduct:
    """A product whose stock reached zero during settlement."""

    product_id: str
    image_path: str | None = None


class CatalogStoreError(Exception):
    """The catalog store could not complete an operation."""


class DuplicateSettlementError(CatalogStoreError):
    """A settlement with this reference was already applied."""

    def __init__(self, reference: str):
        super().__init__(f"Settlement {reference} was already applied")
        self.reference = reference


class CatalogStore(ABC):
    """Abstract catalog store interface."""

    @abstractmethod
    def add_product(self, product: ProductRecord) -> ProductRecord:
        """Insert a new product row."""
        ...

    @abstractmethod
    def get_product(self, product_id: str) -> ProductRecord | None:
        """Return the product with this id, or None."""
        ...

    @abstractmethod
    def list_products(
        self,
        category: str | None = None,
        active_only: bool = True,
        in_stock_only: bool = True,
        limit: int | None = None,
    ) -> list[ProductRecord]:
        """List products, newest first."""
        ...

    @abstractmethod
    def update_product(self, product_id: str, **changes) -> ProductRecord | None:
        """Apply column changes to one product. Returns None when it does not exist."""
        ...

    @abstractmethod
    def delete_products(self, product_ids: list[str]) -> int:
        """Delete every product whose id is listed, in one batch. Returns rows deleted."""
        ...

    @abstractmethod
    def delete_exhausted(self, product_ids: list[str]) -> list[str]:
        """Delete the listed products that still have no stock, in one batch.

        A row restocked after settlement is kept. Returns the ids deleted.
        """
        ...

    @abstractmethod
    def settle_stock(
        self,
        items: list[PurchaseItem],
        reference: str | None = None,
    ) -> list[ExhaustedProduct]:
        """Atomically decrement stock for every item and report exhausted products.

        Stock is floored at zero. The decrement and the exhaustion check for
        all items happen as one serialisable operation; either all items are
        applied or none is. When `reference` is given it is claimed in the same
        operation, and a reference that was already claimed raises
        DuplicateSettlementError without touching stock.
        """
        ...
