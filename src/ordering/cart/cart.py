"""Buyer cart with an explicit hydration lifecycle.

State Machine:
    UNINITIALIZED -> LOADED -> READY

A cart starts UNINITIALIZED and knows nothing about its contents. hydrate()
reads the stored lines (LOADED) and, once they are validated, opens the cart
for use (READY). Reading or mutating an unhydrated cart raises
CartNotHydratedError, so "not loaded yet" is never mistaken for "empty".
Every mutation is persisted immediately.
"""

import json
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

import structlog
from protean.exceptions import ValidationError

from ordering.cart.storage import STORAGE_KEY, CartStorage

logger = structlog.get_logger(__name__)


class CartState(Enum):
    UNINITIALIZED = "Uninitialized"
    LOADED = "Loaded"
    READY = "Ready"


class CartNotHydratedError(Exception):
    """The cart was used before hydrate()."""


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    price_ghs: Decimal
    qty: int
    image_url: str | None = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["price_ghs"] = str(self.price_ghs)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        product_id = str(data["product_id"]).strip()
        qty = int(data["qty"])
        if not product_id or qty < 1:
            raise ValueError("invalid cart line")
        return cls(
            product_id=product_id,
            name=str(data.get("name") or ""),
            price_ghs=Decimal(str(data.get("price_ghs") or 0)),
            qty=qty,
            image_url=data.get("image_url"),
        )


class Cart:
    def __init__(self, storage: CartStorage, key: str = STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key
        self.state = CartState.UNINITIALIZED
        self._lines: list[CartLine] = []

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def hydrate(self) -> "Cart":
        raw = self.storage.load(self.key)
        self.state = CartState.LOADED
        self._lines = self._parse(raw)
        self.state = CartState.READY
        return self

    def _parse(self, raw: str | None) -> list[CartLine]:
        if not raw:
            return []
        try:
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError("cart is not a list")
            return [CartLine.from_dict(entry) for entry in entries]
        except (ValueError, KeyError, TypeError, InvalidOperation) as exc:
            logger.warning("cart.corrupt_storage", key=self.key, error=str(exc))
            return []

    def _require_ready(self) -> None:
        if self.state != CartState.READY:
            raise CartNotHydratedError("Cart has not been hydrated from storage")

    def _persist(self) -> None:
        self.storage.save(self.key, json.dumps([line.to_dict() for line in self._lines]))

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def lines(self) -> list[CartLine]:
        self._require_ready()
        return list(self._lines)

    def total_items(self) -> int:
        self._require_ready()
        return sum(line.qty for line in self._lines)

    def subtotal_ghs(self) -> Decimal:
        self._require_ready()
        return sum((line.price_ghs * line.qty for line in self._lines), Decimal("0"))

    def to_checkout_items(self) -> list[dict]:
        """Lines in the shape checkout initiation accepts."""
        self._require_ready()
        return [
            {"id": line.product_id, "name": line.name, "price_ghs": float(line.price_ghs), "qty": line.qty}
            for line in self._lines
        ]

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product_id: str, name: str, price_ghs, qty: int = 1, image_url: str | None = None) -> None:
        """Add to an existing line, or put a new line at the top of the cart."""
        self._require_ready()
        if qty < 1:
            raise ValidationError({"qty": ["Quantity must be at least 1"]})

        for index, line in enumerate(self._lines):
            if line.product_id == product_id:
                self._lines[index] = CartLine(
                    product_id=line.product_id,
                    name=line.name,
                    price_ghs=line.price_ghs,
                    qty=line.qty + qty,
                    image_url=line.image_url,
                )
                break
        else:
            self._lines.insert(
                0,
                CartLine(
                    product_id=product_id,
                    name=name,
                    price_ghs=Decimal(str(price_ghs)),
                    qty=qty,
                    image_url=image_url,
                ),
            )
        self._persist()

    def remove_item(self, product_id: str) -> None:
        self._require_ready()
        self._lines = [line for line in self._lines if line.product_id != product_id]
        self._persist()

    def set_qty(self, product_id: str, qty: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        self._require_ready()
        if qty <= 0:
            self.remove_item(product_id)
            return
        self._lines = [
            CartLine(line.product_id, line.name, line.price_ghs, qty, line.image_url)
            if line.product_id == product_id
            else line
            for line in self._lines
        ]
        self._persist()

    def clear(self) -> None:
        self._require_ready()
        self._lines = []
        self._persist()
