"""Owner-only page to toggle which pages admin users can open."""

from __future__ import annotations
from typing import Any, Dict

import streamlit as st

from services import config_manager
from services.permissions import PERMISSION_LABELS, admin_permissions


def render_permissions(catalog: Dict[str, Any]) -> None:
    st.subheader("Admin Permissions")
    st.caption("Owners always see every page.")

    current = admin_permissions(catalog)
    with st.form("admin_permissions_form"):
        flags = {
            key: st.toggle(label, value=current.get(key, False), key=f"perm_{key}")
            for key, label in PERMISSION_LABELS.items()
        }
        if st.form_submit_button("Save", type="primary"):
            config_manager.set_admin_permissions(flags)
            st.success("✅ Permissions saved.")
            st.rerun()
