"""Object store factory.

Uses MemoryObjectStore by default; LocalObjectStore when MEDIA_ROOT is set.
"""

from catalogue.media.memory_adapter import MemoryObjectStore
from catalogue.media.port import ObjectStore
from shared.config import get_settings

_current_store: ObjectStore | None = None


def get_object_store() -> ObjectStore:
    """Return the current object store. Defaults to MemoryObjectStore."""
    global _current_store
    if _current_store is None:
        settings = get_settings()
        if settings.media_root:
            from catalogue.media.local_adapter import LocalObjectStore

            _current_store = LocalObjectStore(settings.media_root, settings.media_base_url, settings.image_bucket)
        else:
            _current_store = MemoryObjectStore(settings.media_base_url, settings.image_bucket)
    return _current_store


def set_object_store(store: ObjectStore) -> None:
    """Override the active object store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_object_store() -> None:
    """Reset to the default object store."""
    global _current_store
    _current_store = None
