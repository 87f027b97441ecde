"""Schema management for the SQL catalog store."""

import structlog

from catalogue.store import get_catalog_store
from catalogue.store.sql_adapter import SqlCatalogStore

logger = structlog.get_logger(__name__)


def _sql_store() -> SqlCatalogStore | None:
    store = get_catalog_store()
    if not isinstance(store, SqlCatalogStore):
        logger.info("catalogue.db_skipped", reason="CATALOG_DATABASE_URI is not set")
        return None
    return store


def setup_db() -> bool:
    """Create the products and settlements tables. Returns False when no SQL store is configured."""
    store = _sql_store()
    if store is None:
        return False
    store.create_schema()
    return True


def drop_db() -> bool:
    store = _sql_store()
    if store is None:
        return False
    store.drop_schema()
    return True
