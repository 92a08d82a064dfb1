"""Object storage for uploaded images."""

from .backend import LocalStorage, StorageBackend

__all__ = ["LocalStorage", "StorageBackend"]
