"""Record identifiers: readable slugs for catalog entries, random ids for ledger rows."""

from __future__ import annotations
import re
import uuid
from typing import Iterable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, fallback: str = "item") -> str:
    """
    Lowercase id fragment built from a display name.

    Examples:
        'Hello Panda' -> 'hello_panda'
        'Goodiebag Isi 10!' -> 'goodiebag_isi_10'
    """
    slug = _NON_ALNUM.sub("_", (text or "").strip().lower()).strip("_")
    return slug or fallback


def generate_unique_id(base: str, existing_ids: Iterable[str], prefix: str = "") -> str:
    """
    '<prefix><slug>', suffixed _2, _3, ... until it does not collide.

    Catalog entries (products, bundles, suppliers) use these so ids stay
    readable in the JSON file and in exported reports.
    """
    taken = set(existing_ids)
    candidate = stem = f"{prefix}{slugify(base)}"
    n = 1
    while candidate in taken:
        n += 1
        candidate = f"{stem}_{n}"
    return candidate


def new_record_id(prefix: str) -> str:
    """Random id for ledger and log rows, e.g. 'sin-3f9a0c1b2d4e'."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"
