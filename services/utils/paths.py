"""Where the catalog lives on disk."""

from __future__ import annotations
from pathlib import Path

from .secrets import get_secret

# services/utils/paths.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]


def default_catalog_path() -> Path:
    """CATALOG_PATH if configured, else <project root>/data/catalog.json."""
    configured = get_secret("CATALOG_PATH")
    if configured:
        return Path(configured).expanduser().resolve()
    return PROJECT_ROOT / "data" / "catalog.json"
