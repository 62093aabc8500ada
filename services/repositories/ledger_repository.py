"""
Stock ledger repository - stock in, stock out and manual adjustments.

Every operation works on a deep copy of the catalog and returns
(updated_catalog, record). Stock is always stored in pieces.
"""

from __future__ import annotations
import json
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from inventory.calculators import (
    BundleAvailabilityCalculator,
    MarginCalculator,
    Unit,
    UnitConverter,
    UNIT_LABELS,
)
from services.utils.dates import now_iso, parse_date
from services.utils.id_generator import new_record_id
from .activity_repository import ActivityRepository

logger = logging.getLogger(__name__)


class InsufficientStock(ValueError):
    """Raised when a stock out would drive a product below zero."""

    def __init__(self, product_id: str, requested: int, available: int, message: Optional[str] = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            message or f"Not enough stock for {product_id}: requested {requested}, available {available}"
        )


def _copy(catalog: Dict[str, Any]) -> Dict[str, Any]:
    updated = json.loads(json.dumps(catalog))
    for key in ("products", "stock_in", "stock_out", "adjustments", "activity_logs"):
        if not isinstance(updated.get(key), list):
            updated[key] = []
    return updated


def _find(items: List[Dict[str, Any]], item_id: str) -> Optional[Dict[str, Any]]:
    for it in items:
        if isinstance(it, dict) and str(it.get("id")) == str(item_id):
            return it
    return None


def _record_date(value: Any) -> str:
    d = parse_date(value) if value else None
    return (d or date.today()).isoformat()


class LedgerRepository:
    """Records stock movements against the catalog."""

    @staticmethod
    def record_stock_in(
        catalog: Dict[str, Any],
        product_id: str,
        quantity: int,
        purchase_price: float,
        unit: "Unit | str" = Unit.PIECE,
        supplier_id: Optional[str] = None,
        notes: str = "",
        user: Optional[str] = None,
        when: Any = None,
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Receive goods into stock.

        Args:
            quantity: amount in `unit`; converted to pieces with the product's ratios
            purchase_price: price per piece

        Raises:
            ValueError: unknown product, non-positive quantity, negative price
            UnsupportedUnit: the product does not define the chosen unit
        """
        updated = _copy(catalog)
        product = _find(updated["products"], product_id)
        if product is None:
            raise ValueError(f"Product '{product_id}' not found.")
        if int(quantity) <= 0:
            raise ValueError("Quantity must be at least 1.")
        price = float(purchase_price)
        if price < 0:
            raise ValueError("Purchase price cannot be negative.")

        unit = Unit.parse(unit)
        pieces = UnitConverter.to_pieces(
            quantity, unit, product.get("pieces_per_pack"), product.get("packs_per_carton")
        )

        old_stock = int(product.get("stock", 0) or 0)
        old_avg = float(product.get("avg_purchase_price") or product.get("purchase_price") or 0.0)
        new_stock = old_stock + pieces
        # Weighted average cost; a negative/zero opening stock carries no weight.
        base = max(old_stock, 0)
        product["avg_purchase_price"] = round((base * old_avg + pieces * price) / (base + pieces), 2)
        product["stock"] = new_stock
        product["updated_at"] = now_iso()

        record = {
            "id": new_record_id("sin"),
            "product_id": str(product_id),
            "supplier_id": supplier_id or product.get("supplier_id"),
            "quantity": pieces,
            "unit": unit.value,
            "entered_quantity": int(quantity),
            "purchase_price": price,
            "total_price": round(pieces * price, 2),
            "date": _record_date(when),
            "notes": notes or "",
            "created_by": user,
        }
        updated["stock_in"].append(record)

        entered = f"{int(quantity)} {UNIT_LABELS[unit]}"
        if unit is not Unit.PIECE:
            entered += f" = {pieces} {UNIT_LABELS[Unit.PIECE]}"
        ActivityRepository.append(updated, "stock_in", f"Stock in: {product.get('name', product_id)} ({entered})", user)
        logger.info("stock in %s +%d (%d -> %d)", product_id, pieces, old_stock, new_stock)
        return updated, record

    @staticmethod
    def record_stock_out(
        catalog: Dict[str, Any],
        item_type: str,
        item_id: str,
        quantity: int,
        additional_cost: float = 0.0,
        sale_price: Optional[float] = None,
        notes: str = "",
        user: Optional[str] = None,
        when: Any = None,
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Record a sale/distribution of a product or a bundle.

        Bundles consume quantity * required pieces of every component.

        Args:
            item_type: 'product' or 'bundle'
            quantity: pieces for products, bundle count for bundles
            additional_cost: extra cost on this sale, deducted from revenue
            sale_price: unit price charged; defaults to the catalog price

        Raises:
            ValueError: unknown item/type, non-positive quantity
            InsufficientStock: not enough stock to fulfil the quantity
        """
        kind = str(item_type or "").strip().lower()
        if kind not in ("product", "bundle"):
            raise ValueError("Stock out type must be 'product' or 'bundle'.")
        qty = int(quantity)
        if qty <= 0:
            raise ValueError("Quantity must be at least 1.")
        extra = float(additional_cost or 0.0)
        if extra < 0:
            raise ValueError("Additional cost cannot be negative.")

        updated = _copy(catalog)
        products = updated["products"]
        products_by_id = {str(p.get("id")): p for p in products if isinstance(p, dict)}

        if kind == "product":
            product = products_by_id.get(str(item_id))
            if product is None:
                raise ValueError(f"Product '{item_id}' not found.")
            stock = int(product.get("stock", 0) or 0)
            if stock < qty:
                raise InsufficientStock(str(item_id), qty, stock)
            product["stock"] = stock - qty
            product["updated_at"] = now_iso()
            name = product.get("name", item_id)
            unit_price = float(product.get("sale_price", 0.0) or 0.0) if sale_price is None else float(sale_price)
            unit_cost = float(product.get("purchase_price", 0.0) or 0.0)
        else:
            bundle = _find(updated.get("bundles") or [], item_id)
            if bundle is None:
                raise ValueError(f"Bundle '{item_id}' not found.")
            components = bundle.get("items") or []
            if not components:
                raise ValueError(f"Bundle '{item_id}' has no components.")
            stock_map = {pid: int(p.get("stock", 0) or 0) for pid, p in products_by_id.items()}
            result = BundleAvailabilityCalculator.evaluate(components, stock_map)
            if result["max_assemblable"] < qty:
                limiting = str(result["limiting_product_id"])
                needed = next(c["required"] for c in result["components"] if str(c["product_id"]) == limiting)
                raise InsufficientStock(
                    limiting,
                    qty * needed,
                    stock_map.get(limiting, 0),
                    f"Only {result['max_assemblable']} x {bundle.get('name', item_id)} can be assembled; "
                    f"{limiting} is short",
                )
            for comp in result["components"]:
                product = products_by_id[str(comp["product_id"])]
                product["stock"] = int(product.get("stock", 0) or 0) - qty * comp["required"]
                product["updated_at"] = now_iso()
            name = bundle.get("name", item_id)
            unit_price = float(bundle.get("sale_price", 0.0) or 0.0) if sale_price is None else float(sale_price)
            unit_cost = BundleAvailabilityCalculator.cost_price(components, products_by_id)

        total = round(qty * unit_price, 2)
        record = {
            "id": new_record_id("sout"),
            "type": kind,
            "item_id": str(item_id),
            "quantity": qty,
            "sale_price": unit_price,
            "total_price": total,
            "additional_cost": extra,
            "margin": round(total - extra - qty * unit_cost, 2),
            "date": _record_date(when),
            "notes": notes or "",
            "created_by": user,
        }
        updated["stock_out"].append(record)
        ActivityRepository.append(updated, "stock_out", f"Sale: {name} ({qty} {'bundles' if kind == 'bundle' else 'pcs'})", user)
        logger.info("stock out %s %s x%d", kind, item_id, qty)
        return updated, record

    @staticmethod
    def adjust_stock(
        catalog: Dict[str, Any],
        product_id: str,
        new_stock: int,
        reason: str,
        user: Optional[str] = None,
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Set a product's stock after a count or damage write-off.

        Raises:
            ValueError: unknown product, negative stock, or empty reason
        """
        new_stock = int(new_stock)
        if new_stock < 0:
            raise ValueError("Stock cannot be negative.")
        if not (reason or "").strip():
            raise ValueError("A reason is required for stock adjustments.")

        updated = _copy(catalog)
        product = _find(updated["products"], product_id)
        if product is None:
            raise ValueError(f"Product '{product_id}' not found.")

        previous = int(product.get("stock", 0) or 0)
        product["stock"] = new_stock
        product["updated_at"] = now_iso()
        record = {
            "id": new_record_id("adj"),
            "product_id": str(product_id),
            "previous_stock": previous,
            "new_stock": new_stock,
            "reason": reason.strip(),
            "date": now_iso(),
            "created_by": user,
        }
        updated["adjustments"].append(record)
        diff = new_stock - previous
        ActivityRepository.append(
            updated,
            "adjustment",
            f"Stock adjustment: {product.get('name', product_id)} {diff:+d} ({reason.strip()})",
            user,
        )
        return updated, record

    @staticmethod
    def filter_by_period(
        records: Iterable[Dict[str, Any]],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Records whose date falls in [start, end]; undated records are dropped."""
        out = []
        for r in records:
            d = parse_date(r.get("date"))
            if d is None:
                continue
            if start and d < start:
                continue
            if end and d > end:
                continue
            out.append(r)
        return out

    @staticmethod
    def sale_lines(
        catalog: Dict[str, Any],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """stock_out records in the period as margin-calculator sale lines."""
        records = LedgerRepository.filter_by_period(catalog.get("stock_out", []) or [], start, end)
        return [MarginCalculator.line_from_stock_out(r) for r in records]
