"""Reports page: margin & profit, stock movements and stock position for a period."""

from __future__ import annotations
from datetime import date
from typing import Any, Dict, List, Tuple

import pandas as pd
import streamlit as st

from inventory.calculators import UnitConverter
from inventory.exporters import export_to_excel
from services import config_manager
from services.repositories import LedgerRepository, ProductRepository
from .formatting import format_currency, format_pct


def _default_period() -> Tuple[date, date]:
    today = date.today()
    return today.replace(day=1), today


def render_reports(catalog: Dict[str, Any]) -> None:
    st.subheader("Reports")

    period = st.date_input("Period", value=_default_period(), key="report_period")
    if not isinstance(period, (list, tuple)) or len(period) != 2:
        st.info("ℹ️ Select a start and end date.")
        return
    start, end = period

    report = config_manager.margin_report(start, end, catalog=catalog)
    totals = report["totals"]

    c1, c2, c3 = st.columns(3)
    c1.metric("Revenue", format_currency(totals["total_revenue"]))
    c2.metric("Realized Profit", format_currency(totals["total_realized_profit"]))
    c3.metric("Average Margin", format_pct(totals["average_margin_pct"]))
    st.caption("Average margin is the plain mean over items, not weighted by quantity sold.")

    if report["rejected"]:
        st.warning(
            f"{len(report['rejected'])} sale record(s) reference neither or both a product and a bundle "
            "and were excluded."
        )
        st.dataframe(pd.DataFrame(report["rejected"]), use_container_width=True, hide_index=True)

    margin_rows = _margin_rows(report["items"])
    st.markdown("#### Margin & Profit")
    if margin_rows:
        st.dataframe(pd.DataFrame(margin_rows), use_container_width=True, hide_index=True)
    else:
        st.caption("No sales in this period.")

    stock_in = LedgerRepository.filter_by_period(catalog.get("stock_in", []), start, end)
    stock_out = LedgerRepository.filter_by_period(catalog.get("stock_out", []), start, end)
    position = _stock_position_rows(catalog)

    with st.expander(f"Stock In ({len(stock_in)})"):
        st.dataframe(pd.DataFrame(stock_in), use_container_width=True, hide_index=True)
    with st.expander(f"Stock Out ({len(stock_out)})"):
        st.dataframe(pd.DataFrame(stock_out), use_container_width=True, hide_index=True)
    with st.expander("Stock Position"):
        st.dataframe(pd.DataFrame(position), use_container_width=True, hide_index=True)

    st.markdown("---")
    export_to_excel(
        {
            "Margin": margin_rows,
            "Stock In": stock_in,
            "Stock Out": stock_out,
            "Stock Position": position,
        },
        f"report {start.isoformat()} {end.isoformat()}",
        key="report_excel",
    )


def _margin_rows(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "Item": i["item_name"],
            "Type": i["item_type"],
            "Cost Price": i["cost_price"],
            "Sale Price": i["sale_price"],
            "Margin": i["margin"],
            "Margin %": i["margin_pct"],
            "Qty Sold": i["quantity_sold"],
            "Revenue": i["revenue"],
            "Realized Profit": i["realized_profit"],
        }
        for i in items
    ]


def _stock_position_rows(catalog: Dict[str, Any]) -> List[Dict[str, Any]]:
    rows = []
    for p in ProductRepository.list_all(catalog):
        stock = int(p.get("stock", 0) or 0)
        rows.append({
            "Product": p.get("name"),
            "Stock (pcs)": stock,
            "Stock": UnitConverter.format_quantity(max(stock, 0), p.get("pieces_per_pack"), p.get("packs_per_carton")),
            "Min Stock": int(p.get("min_stock", 0) or 0),
            "Purchase Price": float(p.get("purchase_price", 0) or 0),
            "Asset Value": round(stock * float(p.get("avg_purchase_price") or p.get("purchase_price") or 0), 2),
        })
    return rows
