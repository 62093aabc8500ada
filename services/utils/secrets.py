"""Secret/config lookup: environment first, then Streamlit secrets."""

from __future__ import annotations
import os
from typing import Optional


def get_secret(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Get a config value.

    Environment variables win over .streamlit/secrets.toml so deployments can
    override the file without editing it.
    """
    value = os.environ.get(name)
    if value:
        return value
    try:
        import streamlit as st
        value = st.secrets.get(name)
    except Exception:
        # No secrets.toml (tests, CLI tools) raises from st.secrets.
        value = None
    return str(value) if value not in (None, "") else default


def is_truthy(value: Optional[str]) -> bool:
    """Flag parsing used for DISABLE_* style switches."""
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")
