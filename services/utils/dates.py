"""Date helpers for ledger records (ISO strings in the catalog)."""

from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Any, List, Optional, Tuple


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a stored date.

    Accepts date/datetime objects and ISO strings ('2024-12-15',
    '2024-12-15T10:30:00', '2024-12-15T10:30:00Z'). Returns None when the
    value cannot be read.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if len(text) < 10:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def month_key(d: date) -> str:
    """'YYYY-MM' for a date."""
    return f"{d.year:04d}-{d.month:02d}"


def last_months(today: date, count: int) -> List[Tuple[int, int]]:
    """The last `count` (year, month) pairs ending at today's month, oldest first."""
    year, month = today.year, today.month
    out = []
    for _ in range(max(0, int(count))):
        out.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(out))


def now_iso() -> str:
    """Current UTC time in ISO format."""
    return datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None).isoformat() + "Z"
