"""
Storage manager: the Gist is the shared copy, the local file is its cache.

Reads prefer the Gist and refresh the cache; writes go to both. A Gist failure
switches the session to local-only and leaves a warning for the UI.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from services.utils.paths import default_catalog_path
from .gist_storage import GistError, GistStorage
from .local_storage import LocalStorage

logger = logging.getLogger(__name__)


class StorageManager:
    """Picks the backend for each load/save and remembers the last problem."""

    def __init__(
        self,
        local_path: Optional[Path] = None,
        gist: Optional[GistStorage] = None,
    ):
        self.local_path = Path(local_path) if local_path else default_catalog_path()
        self.local = LocalStorage(self.local_path)
        self.gist = gist if gist is not None else GistStorage()
        # "gist" or "local": where the last load was served from
        self.source = "local"
        self._last_warning: Optional[str] = None

    def get_last_warning(self) -> Optional[str]:
        return self._last_warning

    def _gist_failed(self, message: str) -> None:
        self.gist.disable()
        logger.warning(message)
        self._last_warning = message

    def load(self) -> Dict[str, Any]:
        if self.gist.is_available():
            try:
                data = self.gist.load()
            except GistError as e:
                self._gist_failed(f"Cloud storage unavailable: {e}. Using local cache.")
            else:
                self.local.save(data)
                self.source = "gist"
                self._last_warning = None
                return data

        self.source = "local"
        return self.local.load()

    def save(self, data: Dict[str, Any]) -> Path:
        """Push to the Gist when possible, then always write the local file."""
        if self.gist.is_available():
            try:
                self.gist.save(data)
            except GistError as e:
                self._gist_failed(f"Cloud storage sync failed: {e}. Data saved locally only.")
            else:
                self._last_warning = None
        return self.local.save(data)

    def get_path(self) -> Path:
        return self.local_path

    def get_mtime(self) -> str:
        return self.local.get_mtime()
