"""Configurable in-memory object store for development and testing."""

from catalogue.media.port import ObjectStore, ObjectStoreError


class MemoryObjectStore(ObjectStore):
    """Keeps objects in a dict and can be told to fail removals."""

    def __init__(self, base_url: str = "http://localhost:8000/media", bucket: str = "product-images") -> None:
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.should_fail_remove: bool = False
        self.failure_reason: str = "Storage unavailable"
        self.calls: list[dict] = []

    def configure(self, should_fail_remove: bool, failure_reason: str = "Storage unavailable") -> None:
        """Configure removal behavior at runtime."""
        self.should_fail_remove = should_fail_remove
        self.failure_reason = failure_reason

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        self.calls.append({"method": "upload", "path": path, "content_type": content_type})
        if path in self.objects:
            raise ObjectStoreError(f"Object {path} already exists")
        self.objects[path] = (data, content_type)
        return path

    def remove(self, paths: list[str]) -> None:
        self.calls.append({"method": "remove", "paths": list(paths)})
        if self.should_fail_remove:
            raise ObjectStoreError(self.failure_reason)
        for path in paths:
            self.objects.pop(path, None)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket}/{path}"
