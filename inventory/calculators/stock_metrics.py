"""Dashboard stock metrics - Pure calculation logic."""

from __future__ import annotations
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from services.utils.dates import last_months, month_key, parse_date
from .bundle_calculator import BundleAvailabilityCalculator
from .margin_calculator import MarginCalculator


MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _in_month(record: Mapping[str, Any], month: str) -> bool:
    d = parse_date(record.get("date"))
    return d is not None and month_key(d) == month


def _unit_cost(product: Mapping[str, Any]) -> float:
    """Average purchase price, falling back to the list purchase price."""
    avg = float(product.get("avg_purchase_price", 0.0) or 0.0)
    return avg if avg > 0 else float(product.get("purchase_price", 0.0) or 0.0)


class StockMetrics:
    """Aggregates for the dashboard and stock reports."""

    @staticmethod
    def low_stock(products: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """
        Products at or below their minimum stock, most depleted first.

        critical: stock strictly below the minimum
        fill_pct: stock / min_stock as a percentage, capped at 100
        """
        rows = []
        for p in products:
            stock = int(p.get("stock", 0) or 0)
            minimum = int(p.get("min_stock", 0) or 0)
            if stock > minimum:
                continue
            fill = (stock / minimum * 100.0) if minimum > 0 else 0.0
            rows.append({
                "product_id": p.get("id"),
                "name": p.get("name", ""),
                "stock": stock,
                "min_stock": minimum,
                "critical": stock < minimum,
                "fill_pct": round(min(fill, 100.0), 1),
            })
        return sorted(rows, key=lambda r: (r["fill_pct"], str(r["name"])))

    @staticmethod
    def summarize(catalog: Mapping[str, Any], month: Optional[str] = None) -> Dict[str, Any]:
        """
        Dashboard totals.

        Args:
            catalog: catalog snapshot
            month: 'YYYY-MM' for the monthly figures; defaults to today's month
        """
        month = month or month_key(date.today())
        products = [p for p in catalog.get("products", []) or [] if isinstance(p, dict)]
        bundles = [b for b in catalog.get("bundles", []) or [] if isinstance(b, dict)]

        stock_in = [r for r in catalog.get("stock_in", []) or [] if _in_month(r, month)]
        stock_out = [r for r in catalog.get("stock_out", []) or [] if _in_month(r, month)]

        lines = [MarginCalculator.line_from_stock_out(r) for r in stock_out]
        valid, rejected = MarginCalculator.partition_lines(lines)
        margins = MarginCalculator.aggregate(
            valid,
            {str(p.get("id")): p for p in products},
            {str(b.get("id")): b for b in bundles},
        )

        return {
            "month": month,
            "total_products": len(products),
            "total_stock": sum(int(p.get("stock", 0) or 0) for p in products),
            "total_asset_value": round(
                sum(int(p.get("stock", 0) or 0) * _unit_cost(p) for p in products), 2
            ),
            "low_stock_count": len(StockMetrics.low_stock(products)),
            "monthly_stock_in": sum(int(r.get("quantity", 0) or 0) for r in stock_in),
            "monthly_stock_out": sum(int(r.get("quantity", 0) or 0) for r in stock_out),
            "monthly_revenue": margins["totals"]["total_revenue"],
            "monthly_profit": margins["totals"]["total_realized_profit"],
            "rejected_lines": len(rejected),
        }

    @staticmethod
    def stock_flow(
        stock_in: Iterable[Mapping[str, Any]],
        stock_out: Iterable[Mapping[str, Any]],
        months: int = 6,
        today: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Incoming and outgoing quantities per month, oldest month first."""
        today = today or date.today()
        buckets: Dict[str, Dict[str, Any]] = {}
        for year, month in last_months(today, months):
            key = f"{year:04d}-{month:02d}"
            buckets[key] = {
                "month": key,
                "label": f"{MONTH_LABELS[month - 1]} {year}",
                "stock_in": 0,
                "stock_out": 0,
            }

        for field, records in (("stock_in", stock_in), ("stock_out", stock_out)):
            for r in records:
                d = parse_date(r.get("date"))
                if d is None:
                    continue
                bucket = buckets.get(month_key(d))
                if bucket is not None:
                    bucket[field] += int(r.get("quantity", 0) or 0)

        return list(buckets.values())

    @staticmethod
    def top_products(
        stock_out: Iterable[Mapping[str, Any]],
        bundles: Mapping[str, Mapping[str, Any]],
        products: Mapping[str, Mapping[str, Any]],
        limit: int = 5,
    ) -> List[Dict[str, Any]]:
        """
        Best sellers by pieces sold.

        Bundle sales count toward each component product
        (bundles sold * required quantity).
        """
        sold: Dict[str, int] = {}
        for r in stock_out:
            qty = int(r.get("quantity", 0) or 0)
            item_id = str(r.get("item_id", ""))
            kind = str(r.get("type") or "").lower()
            if kind == "product":
                sold[item_id] = sold.get(item_id, 0) + qty
            elif kind == "bundle":
                for comp in (bundles.get(item_id) or {}).get("items") or []:
                    pid = str(comp.get("product_id"))
                    sold[pid] = sold.get(pid, 0) + qty * int(comp.get("quantity", 0) or 0)

        rows = [
            {
                "product_id": pid,
                "name": str((products.get(pid) or {}).get("name") or pid),
                "sold": n,
            }
            for pid, n in sold.items()
            if n > 0
        ]
        rows.sort(key=lambda r: (-r["sold"], r["name"]))
        return rows[: max(0, int(limit))]

    @staticmethod
    def bundle_overview(
        bundles: Iterable[Mapping[str, Any]],
        current_stock: Mapping[str, int],
    ) -> List[Dict[str, Any]]:
        """Availability for every bundle, for list views."""
        out = []
        for b in bundles:
            result = BundleAvailabilityCalculator.evaluate(b.get("items") or [], current_stock)
            out.append({"bundle_id": b.get("id"), "name": b.get("name", ""), **result})
        return out
