"""Utility functions."""

from .id_generator import generate_unique_id, new_record_id, slugify
from .paths import PROJECT_ROOT, default_catalog_path
from .secrets import get_secret, is_truthy
from .dates import parse_date, month_key, now_iso

__all__ = [
    "generate_unique_id",
    "new_record_id",
    "slugify",
    "PROJECT_ROOT",
    "default_catalog_path",
    "get_secret",
    "is_truthy",
    "parse_date",
    "month_key",
    "now_iso",
]
