"""Dashboard page: headline metrics, low stock alert, stock flow and best sellers."""

from __future__ import annotations
from typing import Any, Dict

import pandas as pd
import streamlit as st

from inventory.calculators import StockMetrics
from services import config_manager
from services.repositories import BundleRepository, ProductRepository
from .formatting import format_currency


def render_dashboard(catalog: Dict[str, Any]) -> None:
    st.subheader("Dashboard")
    summary = config_manager.dashboard_summary(catalog=catalog)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Products", f"{summary['total_products']}")
    c2.metric("Total Stock (pcs)", f"{summary['total_stock']:,}".replace(",", "."))
    c3.metric("Asset Value", format_currency(summary["total_asset_value"]))
    c4.metric("Low Stock", f"{summary['low_stock_count']}")

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Stock In (this month)", f"{summary['monthly_stock_in']}")
    m2.metric("Stock Out (this month)", f"{summary['monthly_stock_out']}")
    m3.metric("Revenue (this month)", format_currency(summary["monthly_revenue"]))
    m4.metric("Profit (this month)", format_currency(summary["monthly_profit"]))

    if summary["rejected_lines"]:
        st.warning(f"{summary['rejected_lines']} malformed sale record(s) excluded from this month's figures.")

    st.markdown("---")
    _render_low_stock(catalog)

    left, right = st.columns(2)
    with left:
        st.markdown("#### Stock Flow (6 months)")
        flow = StockMetrics.stock_flow(catalog.get("stock_in", []), catalog.get("stock_out", []))
        df = pd.DataFrame(flow).set_index("label")[["stock_in", "stock_out"]]
        df.columns = ["In", "Out"]
        st.bar_chart(df)
    with right:
        st.markdown("#### Top Products")
        top = StockMetrics.top_products(
            catalog.get("stock_out", []),
            BundleRepository.by_id(catalog),
            ProductRepository.by_id(catalog),
        )
        if top:
            st.bar_chart(pd.DataFrame(top).set_index("name")[["sold"]])
        else:
            st.caption("No sales recorded yet.")

    _render_bundle_overview(catalog)


def _render_bundle_overview(catalog: Dict[str, Any]) -> None:
    bundles = BundleRepository.list_all(catalog)
    if not bundles:
        return
    products = ProductRepository.by_id(catalog)
    rows = StockMetrics.bundle_overview(bundles, ProductRepository.stock_map(catalog))
    st.markdown("#### Bundle Availability")
    st.dataframe(
        pd.DataFrame([
            {
                "Bundle": r["name"],
                "Can Assemble": r["max_assemblable"],
                "Limited By": (products.get(str(r["limiting_product_id"])) or {}).get("name") or "-",
            }
            for r in rows
        ]),
        use_container_width=True,
        hide_index=True,
    )


def _render_low_stock(catalog: Dict[str, Any]) -> None:
    rows = StockMetrics.low_stock(ProductRepository.list_all(catalog))
    if not rows:
        return

    st.markdown(f"#### ⚠️ Low Stock: {len(rows)} product(s) need restocking")
    for row in rows:
        label = f"**{row['name']}** {row['stock']} / {row['min_stock']} pcs"
        if row["critical"]:
            st.error(label)
        else:
            st.warning(label)
        st.progress(int(row["fill_pct"]))
