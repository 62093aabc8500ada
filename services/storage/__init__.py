"""Storage layer for catalog persistence."""

from .gist_storage import GistStorage, GistError
from .local_storage import LocalStorage, empty_catalog, ensure_shape
from .storage_manager import StorageManager

__all__ = ["GistStorage", "GistError", "LocalStorage", "StorageManager", "empty_catalog", "ensure_shape"]
