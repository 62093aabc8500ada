"""
Local JSON file backend.

Doubles as the offline cache of the Gist copy. Writes go through a temp file
and os.replace so a crash never leaves half a catalog behind.
"""

from __future__ import annotations
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Top-level lists every catalog document carries.
CATALOG_LISTS = (
    "products",
    "bundles",
    "suppliers",
    "stock_in",
    "stock_out",
    "adjustments",
    "activity_logs",
)


def empty_catalog() -> Dict[str, Any]:
    """A catalog with every list present and no records."""
    data: Dict[str, Any] = {key: [] for key in CATALOG_LISTS}
    data["settings"] = {}
    return data


def ensure_shape(data: Any) -> Dict[str, Any]:
    """Fill in missing top-level keys; non-dict roots become an empty catalog."""
    if not isinstance(data, dict):
        return empty_catalog()
    for key in CATALOG_LISTS:
        if not isinstance(data.get(key), list):
            data[key] = []
    if not isinstance(data.get("settings"), dict):
        data["settings"] = {}
    return data


class LocalStorage:
    """Catalog kept in one JSON file."""

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)

    def exists(self) -> bool:
        return self.file_path.exists()

    def _quarantine(self) -> Optional[Path]:
        """Move an unreadable file aside so the next save cannot overwrite it."""
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        target = self.file_path.with_name(f"{self.file_path.name}.corrupt-{stamp}")
        try:
            os.replace(self.file_path, target)
        except OSError as e:
            logger.error("Could not move corrupt catalog %s aside: %s", self.file_path, e)
            return None
        return target

    def load(self) -> Dict[str, Any]:
        """
        Read the catalog.

        Missing file: empty catalog. Invalid JSON: the file is renamed to
        '<name>.corrupt-<timestamp>' and an empty catalog is returned.
        """
        if not self.file_path.exists():
            return empty_catalog()
        try:
            raw = self.file_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not read catalog %s: %s", self.file_path, e)
            return empty_catalog()
        try:
            return ensure_shape(json.loads(raw))
        except json.JSONDecodeError as e:
            moved = self._quarantine()
            logger.error("Catalog %s is not valid JSON (%s); kept as %s", self.file_path, e, moved)
            return empty_catalog()

    def save(self, data: Dict[str, Any]) -> Path:
        """Atomically replace the file with `data`; OSError propagates."""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, self.file_path)
        logger.debug("Catalog written to %s", self.file_path)
        return self.file_path

    def get_mtime(self) -> str:
        """'YYYY-MM-DD HH:MM:SS' of the last write, for the sidebar caption."""
        if not self.file_path.exists():
            return "(not created yet)"
        return datetime.fromtimestamp(self.file_path.stat().st_mtime).strftime("%Y-%m-%d %H:%M:%S")
