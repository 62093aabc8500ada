"""Margin and realized profit aggregation over sale lines."""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .bundle_calculator import BundleAvailabilityCalculator


class MalformedLineItem(ValueError):
    """A sale line must reference exactly one of product_id / bundle_id."""

    def __init__(self, line: Mapping[str, Any], message: Optional[str] = None):
        self.line = dict(line)
        super().__init__(message or f"Sale line must reference exactly one product or bundle: {self.line}")


def _present(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


class MarginCalculator:
    """Per-item margin and period profit for the reports page."""

    @staticmethod
    def line_key(line: Mapping[str, Any]) -> Tuple[str, str]:
        """
        Return ("product" | "bundle", item_id) for a sale line.

        Raises:
            MalformedLineItem: neither or both references are set
        """
        has_product = _present(line.get("product_id"))
        has_bundle = _present(line.get("bundle_id"))
        if has_product == has_bundle:
            raise MalformedLineItem(line)
        if has_product:
            return "product", str(line["product_id"])
        return "bundle", str(line["bundle_id"])

    @staticmethod
    def line_from_stock_out(record: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Convert a stored stock_out record into a sale line.

        Revenue is what was actually recorded: total price minus the
        additional cost entered on the sale.
        """
        item_type = str(record.get("type") or "").strip().lower()
        item_id = record.get("item_id")
        revenue = float(record.get("total_price", 0.0) or 0.0) - float(record.get("additional_cost", 0.0) or 0.0)
        return {
            "product_id": item_id if item_type == "product" else None,
            "bundle_id": item_id if item_type == "bundle" else None,
            "quantity": int(record.get("quantity", 0) or 0),
            "revenue": revenue,
            "source_id": record.get("id"),
        }

    @staticmethod
    def partition_lines(
        lines: Iterable[Mapping[str, Any]],
    ) -> Tuple[List[Mapping[str, Any]], List[MalformedLineItem]]:
        """Split lines into (valid, rejected) so callers can report rejections."""
        valid: List[Mapping[str, Any]] = []
        rejected: List[MalformedLineItem] = []
        for line in lines:
            try:
                MarginCalculator.line_key(line)
            except MalformedLineItem as e:
                rejected.append(e)
                continue
            valid.append(line)
        return valid, rejected

    @staticmethod
    def _item_prices(
        item_type: str,
        item_id: str,
        products: Mapping[str, Mapping[str, Any]],
        bundles: Mapping[str, Mapping[str, Any]],
    ) -> Tuple[str, float, float]:
        """(name, cost_price, sale_price); unknown items cost and sell at 0."""
        if item_type == "product":
            product = products.get(item_id) or {}
            return (
                str(product.get("name") or item_id),
                float(product.get("purchase_price", 0.0) or 0.0),
                float(product.get("sale_price", 0.0) or 0.0),
            )

        bundle = bundles.get(item_id) or {}
        cost = BundleAvailabilityCalculator.cost_price(bundle.get("items") or [], products)
        return (
            str(bundle.get("name") or item_id),
            cost,
            float(bundle.get("sale_price", 0.0) or 0.0),
        )

    @staticmethod
    def aggregate(
        lines: Iterable[Mapping[str, Any]],
        products: Mapping[str, Mapping[str, Any]],
        bundles: Mapping[str, Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """
        Aggregate sale lines per distinct product/bundle.

        Args:
            lines: sale lines {"product_id" | "bundle_id", "quantity", "revenue"}
            products: product_id -> product record
            bundles: bundle_id -> bundle record

        Returns:
            {"items": [...], "totals": {...}}; items keep first-appearance order

        Raises:
            MalformedLineItem: for any line referencing zero or two items
        """
        grouped: Dict[Tuple[str, str], Dict[str, float]] = {}
        for line in lines:
            key = MarginCalculator.line_key(line)
            bucket = grouped.setdefault(key, {"quantity": 0, "revenue": 0.0})
            bucket["quantity"] += int(line.get("quantity", 0) or 0)
            bucket["revenue"] += float(line.get("revenue", 0.0) or 0.0)

        items: List[Dict[str, Any]] = []
        for (item_type, item_id), bucket in grouped.items():
            name, cost, price = MarginCalculator._item_prices(item_type, item_id, products, bundles)
            margin = price - cost
            margin_pct = (margin / cost * 100.0) if cost > 0 else 0.0
            qty = int(bucket["quantity"])
            realized = bucket["revenue"] - qty * cost

            items.append({
                "item_id": item_id,
                "item_type": item_type,
                "item_name": name,
                "cost_price": round(cost, 2),
                "sale_price": round(price, 2),
                "margin": round(margin, 2),
                "margin_pct": round(margin_pct, 2),
                "quantity_sold": qty,
                "revenue": round(bucket["revenue"], 2),
                "realized_profit": round(realized, 2),
            })

        total_profit = sum(i["realized_profit"] for i in items)
        total_revenue = sum(i["revenue"] for i in items)
        # Unweighted mean over distinct items, not volume weighted.
        avg_margin = (sum(i["margin_pct"] for i in items) / len(items)) if items else 0.0

        return {
            "items": items,
            "totals": {
                "total_revenue": round(total_revenue, 2),
                "total_realized_profit": round(total_profit, 2),
                "average_margin_pct": round(avg_margin, 2),
            },
        }
