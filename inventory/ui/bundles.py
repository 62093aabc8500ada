"""Bundles page: what can be assembled from current stock, and new recipes."""

from __future__ import annotations
from typing import Any, Dict, List, Optional

import streamlit as st

from inventory.calculators import BundleAvailabilityCalculator
from services import config_manager
from services.repositories import BUNDLE_CATEGORIES, BundleRepository, ProductRepository
from .formatting import format_currency


def render_bundles(catalog: Dict[str, Any], user: Optional[str] = None) -> None:
    st.subheader("Bundles")

    query = st.text_input("Search bundles", placeholder="Bundle name…", key="bundle_search")
    products = ProductRepository.by_id(catalog)

    bundles = [
        b for b in BundleRepository.list_all(catalog)
        if query.strip().casefold() in str(b.get("name", "")).casefold()
    ]
    if bundles:
        cols = st.columns(3)
        for i, bundle in enumerate(bundles):
            with cols[i % 3]:
                _render_bundle_card(catalog, bundle, products)
    else:
        st.info("ℹ️ No bundles found.")

    st.markdown("---")
    with st.expander("➕ New bundle"):
        _render_new_bundle(products, user)


def _render_bundle_card(catalog: Dict[str, Any], bundle: Dict[str, Any], products: Dict[str, Any]) -> None:
    items = bundle.get("items") or []
    result = config_manager.bundle_availability(bundle["id"], catalog)
    cost = BundleAvailabilityCalculator.cost_price(items, products)

    with st.container(border=True):
        st.markdown(f"**{bundle.get('name', bundle.get('id'))}**")
        st.caption(str(bundle.get("category", "")).capitalize())

        st.caption(f"Contents ({len(result['components'])} item)")
        for row in result["components"]:
            name = (products.get(str(row["product_id"])) or {}).get("name") or row["product_id"]
            mark = "✅" if row["sufficient"] else "⚠️"
            st.markdown(f"{mark} {name} ×{row['required']} (stock {row['stock']})")

        c1, c2 = st.columns(2)
        c1.metric("Sale Price", format_currency(bundle.get("sale_price", 0)))
        c2.metric("Can Assemble", f"{result['max_assemblable']} pcs")
        st.caption(f"Cost from components: {format_currency(cost)}")

        if not result["available"]:
            limiting = result["limiting_product_id"]
            name = (products.get(str(limiting)) or {}).get("name") or limiting
            st.error(f"Not enough stock of {name}")


def _render_new_bundle(products: Dict[str, Any], user: Optional[str]) -> None:
    name = st.text_input("Bundle name *", key="new_bundle_name")
    c1, c2 = st.columns(2)
    category = c1.selectbox(
        "Category", list(BUNDLE_CATEGORIES), format_func=str.capitalize, key="new_bundle_category"
    )
    sale_price = c2.number_input(
        "Sale price *", min_value=0.0, step=1000.0, value=0.0, format="%.0f", key="new_bundle_price"
    )
    chosen = st.multiselect(
        "Contents *",
        list(products),
        format_func=lambda pid: products[pid].get("name", pid),
        key="new_bundle_products",
    )
    items: List[Dict[str, Any]] = []
    for pid in chosen:
        qty = st.number_input(
            f"{products[pid].get('name', pid)}: pcs per bundle",
            min_value=1, step=1, value=1, key=f"new_bundle_qty_{pid}",
        )
        items.append({"product_id": pid, "quantity": int(qty)})

    if items:
        cost = BundleAvailabilityCalculator.cost_price(items, products)
        st.caption(f"Cost from components: {format_currency(cost)} · margin {format_currency(sale_price - cost)}")

    if st.button("Save Bundle", type="primary", key="new_bundle_save"):
        if not items:
            st.error("❌ Pick at least one product.")
            return
        try:
            config_manager.save_bundle(
                {"name": name, "category": category, "sale_price": sale_price, "items": items}, user
            )
        except ValueError as e:
            st.error(f"❌ {e}")
            return
        st.success(f"✅ Bundle {name.strip()} saved.")
        st.rerun()
