"""Object store port: abstract interface for product image storage."""

from abc import ABC, abstractmethod


class ObjectStoreError(Exception):
    """The object store could not complete an operation."""


class ObjectStore(ABC):
    """Abstract interface for object store adapters."""

    @abstractmethod
    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store `data` under `path`. Refuses to overwrite. Returns the path."""
        ...

    @abstractmethod
    def remove(self, paths: list[str]) -> None:
        """Delete every listed object in one batch. Missing objects are ignored."""
        ...

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Resolve the public URL of a stored object."""
        ...
