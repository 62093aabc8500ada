"""
Products Page
=============

Stock position per product plus two forms:

- Add / edit product: names, prices, minimum stock and the pack/carton
  ratios that drive unit conversion on the Stock In page.
- Stock adjustment: set the counted stock with a reason (damage, recount).

Both forms save through services.config_manager.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import pandas as pd
import streamlit as st

from inventory.calculators import UnitConverter
from services import config_manager
from services.repositories import ProductRepository, SupplierRepository
from .formatting import format_currency

logger = logging.getLogger(__name__)

_NEW = "+ New product"
_NONE = "-- None --"


def render_products(catalog: Dict[str, Any], user: Optional[str] = None) -> None:
    st.subheader("Products")

    query = st.text_input("Search products", placeholder="Product name…", key="product_search")
    products = [
        p for p in ProductRepository.list_all(catalog)
        if query.strip().casefold() in str(p.get("name", "")).casefold()
    ]
    suppliers = {s["id"]: s["name"] for s in SupplierRepository.list_all(catalog)}

    if products:
        st.dataframe(
            pd.DataFrame([
                {
                    "Product": p.get("name"),
                    "Supplier": suppliers.get(p.get("supplier_id"), "-"),
                    "Stock": UnitConverter.format_quantity(
                        max(int(p.get("stock", 0) or 0), 0), p.get("pieces_per_pack"), p.get("packs_per_carton")
                    ),
                    "Stock (pcs)": int(p.get("stock", 0) or 0),
                    "Min Stock": int(p.get("min_stock", 0) or 0),
                    "Purchase Price": format_currency(p.get("purchase_price")),
                    "Sale Price": format_currency(p.get("sale_price")),
                }
                for p in products
            ]),
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("ℹ️ No products found.")

    st.markdown("---")
    left, right = st.columns(2)
    with left:
        _render_product_form(catalog, suppliers, user)
    with right:
        _render_adjustment_form(catalog, user)


def _render_product_form(catalog: Dict[str, Any], suppliers: Dict[str, str], user: Optional[str]) -> None:
    st.markdown("#### Add / Edit Product")
    by_label = {p["name"]: p for p in ProductRepository.list_all(catalog)}
    choice = st.selectbox("Product", [_NEW] + list(by_label), key="product_edit_choice")
    current = by_label.get(choice) or {}

    supplier_ids = [None] + list(suppliers)
    supplier_index = supplier_ids.index(current.get("supplier_id")) if current.get("supplier_id") in suppliers else 0

    with st.form(f"product_form_{current.get('id', 'new')}"):
        name = st.text_input("Name *", value=current.get("name", ""))
        category = st.text_input("Category", value=current.get("category", ""))
        supplier_id = st.selectbox(
            "Supplier",
            supplier_ids,
            index=supplier_index,
            format_func=lambda sid: suppliers.get(sid, _NONE) if sid else _NONE,
        )
        c1, c2 = st.columns(2)
        purchase = c1.number_input(
            "Purchase price / pcs *", min_value=0.0, step=100.0, format="%.0f",
            value=float(current.get("purchase_price", 0) or 0),
        )
        sale = c2.number_input(
            "Sale price / pcs *", min_value=0.0, step=100.0, format="%.0f",
            value=float(current.get("sale_price", 0) or 0),
        )
        c3, c4, c5 = st.columns(3)
        min_stock = c3.number_input("Min stock (pcs)", min_value=0, step=1, value=int(current.get("min_stock", 0) or 0))
        ppp = c4.number_input(
            "Pcs per pack", min_value=0, step=1, value=int(current.get("pieces_per_pack") or 0),
            help="0 = not sold in packs",
        )
        ppc = c5.number_input(
            "Packs per Dus", min_value=0, step=1, value=int(current.get("packs_per_carton") or 0),
            help="0 = not sold in cartons",
        )
        stock = None
        if not current:
            stock = st.number_input("Opening stock (pcs)", min_value=0, step=1, value=0)
        else:
            st.caption("Use the stock adjustment form to change stock.")

        if st.form_submit_button("Save Product", type="primary"):
            payload = dict(current)
            payload.update({
                "name": name,
                "category": category,
                "supplier_id": supplier_id,
                "purchase_price": purchase,
                "sale_price": sale,
                "min_stock": int(min_stock),
                "pieces_per_pack": int(ppp),
                "packs_per_carton": int(ppc),
            })
            if stock is not None:
                payload["stock"] = int(stock)
            try:
                was_new = config_manager.save_product(payload, user)
            except ValueError as e:
                st.error(f"❌ {e}")
                return
            st.success(f"✅ {name} {'added' if was_new else 'updated'}.")
            st.rerun()


def _render_adjustment_form(catalog: Dict[str, Any], user: Optional[str]) -> None:
    st.markdown("#### Stock Adjustment")
    products = {p["id"]: p for p in ProductRepository.list_all(catalog)}
    if not products:
        st.caption("No products to adjust.")
        return

    with st.form("stock_adjust_form"):
        product_id = st.selectbox(
            "Product",
            list(products),
            format_func=lambda pid: f"{products[pid]['name']} (stock: {products[pid].get('stock', 0)})",
        )
        new_stock = st.number_input("Counted stock (pcs)", min_value=0, step=1, value=0)
        reason = st.text_input("Reason *", placeholder="Recount, damaged, expired…")

        if st.form_submit_button("Save Adjustment"):
            try:
                record = config_manager.adjust_stock(product_id, int(new_stock), reason, user)
            except ValueError as e:
                st.error(f"❌ {e}")
                return
            logger.info("stock of %s set to %d", product_id, record["new_stock"])
            st.success(f"✅ Stock set: {record['previous_stock']} -> {record['new_stock']} pcs.")
            st.rerun()
