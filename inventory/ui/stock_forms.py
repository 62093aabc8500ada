"""
Stock In / Stock Out Forms
==========================

Operator forms for receiving goods and recording sales.

- Stock In: quantity can be entered in Pcs, Pack or Dus (carton) when the
  product defines the ratios; it is converted to pieces before saving.
- Stock Out: single products or bundles; bundles are checked against current
  component stock before anything is written.

Both forms save through services.config_manager, which reloads the catalog
right before applying the movement.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import streamlit as st

from inventory.calculators import (
    BundleAvailabilityCalculator,
    UNIT_LABELS,
    UnitConverter,
    UnsupportedUnit,
)
from services import config_manager
from services.repositories import (
    BundleRepository,
    InsufficientStock,
    ProductRepository,
    SupplierRepository,
)
from .formatting import format_currency

logger = logging.getLogger(__name__)

_PLACEHOLDER = "-- Select --"


# ============================================================================
# STOCK IN
# ============================================================================

def render_stock_in(catalog: Dict[str, Any], user: Optional[str] = None) -> None:
    st.subheader("Stock In")
    st.caption("Add received goods to the warehouse.")

    products = ProductRepository.list_all(catalog)
    if not products:
        st.info("ℹ️ No products in the catalog yet.")
        return
    suppliers = SupplierRepository.list_all(catalog)

    labels = {f"{p['name']} (stock: {p.get('stock', 0)})": p for p in products}
    choice = st.selectbox("Product *", [_PLACEHOLDER] + list(labels), key="stock_in_product")
    product = labels.get(choice)

    supplier_labels = {s["name"]: s["id"] for s in suppliers}
    default_supplier = 0
    if product and product.get("supplier_id"):
        names = list(supplier_labels)
        for i, name in enumerate(names):
            if supplier_labels[name] == product["supplier_id"]:
                default_supplier = i + 1
                break
    supplier_name = st.selectbox(
        "Supplier", [_PLACEHOLDER] + list(supplier_labels), index=default_supplier, key="stock_in_supplier"
    )

    ppp = product.get("pieces_per_pack") if product else None
    ppc = product.get("packs_per_carton") if product else None
    units = UnitConverter.available_units(ppp, ppc)

    c1, c2, c3 = st.columns(3)
    with c1:
        quantity = st.number_input("Quantity *", min_value=1, step=1, value=1, format="%d", key="stock_in_qty")
    with c2:
        unit = st.selectbox(
            "Unit", units, format_func=lambda u: UNIT_LABELS[u], key="stock_in_unit"
        )
    with c3:
        price = st.number_input(
            "Purchase price / pcs *",
            min_value=0.0,
            step=100.0,
            value=float(product.get("purchase_price", 0.0)) if product else 0.0,
            format="%.0f",
            key="stock_in_price",
        )
    notes = st.text_area("Notes", placeholder="Optional", key="stock_in_notes")

    if not product:
        return

    try:
        pieces = UnitConverter.to_pieces(int(quantity), unit, ppp, ppc)
    except UnsupportedUnit as e:
        st.error(str(e))
        return

    with st.container(border=True):
        st.markdown("**Summary**")
        s1, s2, s3 = st.columns(3)
        s1.metric("Pieces", f"{pieces}")
        s2.metric("Price / pcs", format_currency(price))
        s3.metric("Total", format_currency(pieces * price))
        after = int(product.get("stock", 0) or 0) + pieces
        st.caption(f"Stock after: {UnitConverter.format_quantity(after, ppp, ppc)} ({after} pcs)")

    if st.button("Save Stock In", type="primary", key="stock_in_save"):
        try:
            config_manager.record_stock_in(
                product["id"],
                int(quantity),
                float(price),
                unit=unit,
                supplier_id=supplier_labels.get(supplier_name),
                notes=notes,
                user=user,
            )
        except (UnsupportedUnit, ValueError) as e:
            st.error(f"❌ {e}")
            return
        st.success(f"✅ {pieces} pcs {product['name']} added to stock.")
        st.rerun()


# ============================================================================
# STOCK OUT
# ============================================================================

def render_stock_out(catalog: Dict[str, Any], user: Optional[str] = None) -> None:
    st.subheader("Stock Out")
    st.caption("Record a sale or distribution.")

    kind = st.radio(
        "Type",
        ["product", "bundle"],
        format_func=lambda k: "Single product" if k == "product" else "Bundle",
        horizontal=True,
        key="stock_out_type",
    )

    products = ProductRepository.by_id(catalog)
    if kind == "product":
        options = {f"{p['name']} (stock: {p.get('stock', 0)})": p for p in ProductRepository.list_all(catalog)}
    else:
        options = {
            f"{b['name']} - {format_currency(b.get('sale_price', 0))}": b
            for b in BundleRepository.list_all(catalog)
        }

    choice = st.selectbox("Item *", [_PLACEHOLDER] + list(options), key=f"stock_out_item_{kind}")
    item = options.get(choice)

    max_qty: Optional[int] = None
    if item and kind == "bundle":
        result = BundleAvailabilityCalculator.evaluate(
            item.get("items") or [], ProductRepository.stock_map(catalog)
        )
        max_qty = result["max_assemblable"]
        with st.container(border=True):
            st.caption("Bundle contents")
            for row in result["components"]:
                name = (products.get(str(row["product_id"])) or {}).get("name") or row["product_id"]
                st.markdown(f"- {name} ×{row['required']} (stock {row['stock']})")
            st.caption(f"Can assemble: {max_qty}")
    elif item:
        max_qty = int(item.get("stock", 0) or 0)

    c1, c2 = st.columns(2)
    with c1:
        quantity = st.number_input("Quantity *", min_value=1, step=1, value=1, format="%d", key="stock_out_qty")
    with c2:
        additional = st.number_input(
            "Additional cost", min_value=0.0, step=100.0, value=0.0, format="%.0f", key="stock_out_extra"
        )
    notes = st.text_area("Notes", placeholder="Optional", key="stock_out_notes")

    if not item:
        return

    unit_price = float(item.get("sale_price", 0.0) or 0.0)
    subtotal = int(quantity) * unit_price
    with st.container(border=True):
        st.markdown("**Summary**")
        s1, s2, s3 = st.columns(3)
        s1.metric("Price / unit", format_currency(unit_price))
        s2.metric("Subtotal", format_currency(subtotal))
        s3.metric("Total", format_currency(subtotal - float(additional)))
        if additional:
            st.caption(f"Additional cost: -{format_currency(additional)}")

    if max_qty is not None and int(quantity) > max_qty:
        st.warning(f"Only {max_qty} available.")

    if st.button("Save Stock Out", type="primary", key="stock_out_save"):
        try:
            config_manager.record_stock_out(
                kind,
                item["id"],
                int(quantity),
                additional_cost=float(additional),
                notes=notes,
                user=user,
            )
        except InsufficientStock as e:
            logger.info("stock out refused: %s", e)
            st.error(f"❌ {e}")
            return
        except ValueError as e:
            st.error(f"❌ {e}")
            return
        st.success(f"✅ {int(quantity)} × {item['name']} recorded.")
        st.rerun()
