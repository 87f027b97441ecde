"""Catalog store factory.

Provides get_catalog_store() / set_catalog_store() to swap implementations:
- MemoryCatalogStore for development and testing
- SqlCatalogStore when CATALOG_DATABASE_URI is configured
"""

from catalogue.store.memory_adapter import MemoryCatalogStore
from catalogue.store.port import CatalogStore
from shared.config import get_settings

_current_store: CatalogStore | None = None


def get_catalog_store() -> CatalogStore:
    """Return the current catalog store, building it from settings on first use."""
    global _current_store
    if _current_store is None:
        database_uri = get_settings().catalog_database_uri
        if database_uri:
            from catalogue.store.sql_adapter import SqlCatalogStore

            _current_store = SqlCatalogStore(database_uri)
        else:
            _current_store = MemoryCatalogStore()
    return _current_store


def set_catalog_store(store: CatalogStore) -> None:
    """Override the active catalog store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_catalog_store() -> None:
    """Reset to the default catalog store."""
    global _current_store
    _current_store = None
