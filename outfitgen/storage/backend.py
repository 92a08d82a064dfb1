"""Object storage backends for uploaded clothing images."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Minimal bucket/key interface the wardrobe service depends on."""

    async def save(self, bucket: str, key: str, data: bytes, content_type: str | None = None) -> str:
        """Store ``data`` and return its public URL."""

    async def delete(self, bucket: str, key: str) -> None:
        """Remove an object if it exists."""

    def public_url(self, bucket: str, key: str) -> str:
        """Return the URL under which the object is served."""


class LocalStorage:
    """Stores objects on the local filesystem under ``root/bucket/key``."""

    def __init__(self, root: Path, base_url: str = "/media") -> None:
        self._root = root
        self._base_url = base_url.rstrip("/")
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, bucket: str, key: str) -> Path:
        path = (self._root / bucket / key).resolve()
        if not path.is_relative_to(self._root.resolve()):
            raise ValueError(f"Storage key escapes the storage root: {key!r}")
        return path

    def public_url(self, bucket: str, key: str) -> str:
        return f"{self._base_url}/{bucket}/{key}"

    async def save(self, bucket: str, key: str, data: bytes, content_type: str | None = None) -> str:
        path = self._path_for(bucket, key)
        await asyncio.to_thread(self._write_file, path, data)
        logger.info("Stored %s/%s (%d bytes, %s)", bucket, key, len(data), content_type or "unknown")
        return self.public_url(bucket, key)

    async def delete(self, bucket: str, key: str) -> None:
        path = self._path_for(bucket, key)
        await asyncio.to_thread(path.unlink, missing_ok=True)

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
