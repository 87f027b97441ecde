"""Cart storage port and adapters.

The storefront keeps the cart on the buyer's device under a single key. The
port models that key/value slot; MemoryCartStorage stands in for it in tests
and JsonFileCartStorage keeps it in a local JSON file.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

STORAGE_KEY = "baebeboo_cart_v1"


class CartStorage(ABC):
    """Abstract key/value slot holding the serialized cart."""

    @abstractmethod
    def load(self, key: str) -> str | None:
        """Return the stored value, or None when nothing is stored."""
        ...

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        ...


class MemoryCartStorage(CartStorage):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})
        self.saves = 0

    def load(self, key: str) -> str | None:
        return self.values.get(key)

    def save(self, key: str, value: str) -> None:
        self.values[key] = value
        self.saves += 1


class JsonFileCartStorage(CartStorage):
    """All keys in one JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (FileNotFoundError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def load(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def save(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self.path)
