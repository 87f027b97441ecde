"""Filesystem object store.

Objects are written below MEDIA_ROOT/<bucket>/ and served from
MEDIA_BASE_URL/<bucket>/ by whatever fronts the application.
"""

from pathlib import Path

import structlog

from catalogue.media.port import ObjectStore, ObjectStoreError

logger = structlog.get_logger(__name__)


class LocalObjectStore(ObjectStore):
    def __init__(self, root: str | Path, base_url: str, bucket: str = "product-images") -> None:
        self.root = Path(root) / bucket
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket

    def _resolve(self, path: str) -> Path:
        target = (self.root / path.lstrip("/")).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise ObjectStoreError(f"Path escapes the bucket: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("xb") as fh:
                fh.write(data)
        except FileExistsError as exc:
            raise ObjectStoreError(f"Object {path} already exists") from exc
        except OSError as exc:
            raise ObjectStoreError(str(exc)) from exc
        logger.debug("media.uploaded", path=path, content_type=content_type, size=len(data))
        return path

    def remove(self, paths: list[str]) -> None:
        failures = []
        for path in paths:
            try:
                self._resolve(path).unlink(missing_ok=True)
            except (OSError, ObjectStoreError) as exc:
                failures.append(f"{path}: {exc}")
        if failures:
            raise ObjectStoreError("; ".join(failures))

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket}/{path.lstrip('/')}"
