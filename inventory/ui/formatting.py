"""Display formatting shared by the pages."""

from __future__ import annotations
from typing import Any


def format_currency(value: Any) -> str:
    """
    Rupiah without decimals, dot as thousands separator.

    Examples:
        25000 -> 'Rp 25.000'
        -1500 -> '-Rp 1.500'
    """
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        amount = 0.0
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp {abs(round(amount)):,.0f}".replace(",", ".")


def format_pct(value: Any) -> str:
    """'66.67%'"""
    try:
        return f"{float(value or 0):.2f}%"
    except (TypeError, ValueError):
        return "0.00%"
