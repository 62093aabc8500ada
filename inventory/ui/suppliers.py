"""Suppliers page: supplier list and a form to add one."""

from __future__ import annotations
from typing import Any, Dict, Optional

import pandas as pd
import streamlit as st

from services import config_manager
from services.repositories import SupplierRepository


def render_suppliers(catalog: Dict[str, Any], user: Optional[str] = None) -> None:
    st.subheader("Suppliers")

    suppliers = SupplierRepository.list_all(catalog)
    if suppliers:
        counts: Dict[str, int] = {}
        for p in catalog.get("products", []) or []:
            sid = p.get("supplier_id") if isinstance(p, dict) else None
            if sid:
                counts[sid] = counts.get(sid, 0) + 1
        st.dataframe(
            pd.DataFrame([
                {
                    "Supplier": s.get("name"),
                    "Contact": s.get("contact", ""),
                    "Address": s.get("address", ""),
                    "Products": counts.get(s["id"], 0),
                }
                for s in suppliers
            ]),
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("ℹ️ No suppliers yet.")

    with st.form("supplier_add_form", clear_on_submit=True):
        st.markdown("#### Add Supplier")
        name = st.text_input("Name *")
        contact = st.text_input("Contact", placeholder="Phone or e-mail")
        address = st.text_area("Address")
        if st.form_submit_button("Save Supplier", type="primary"):
            try:
                config_manager.add_supplier({"name": name, "contact": contact, "address": address})
            except ValueError as e:
                st.error(f"❌ {e}")
                return
            st.success(f"✅ {name.strip()} added.")
            st.rerun()
