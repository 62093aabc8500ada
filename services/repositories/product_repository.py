"""Product repository - handles product CRUD and catalog snapshots."""

from __future__ import annotations
import json
from typing import Any, Dict, List, Optional, Tuple

from services.utils.dates import now_iso
from services.utils.id_generator import generate_unique_id
from .activity_repository import ActivityRepository


def _int_or_none(value: Any) -> Optional[int]:
    """Ratios: empty/zero/invalid mean 'unit not offered' and are stored as None."""
    try:
        n = int(value)
    except (TypeError, ValueError):
        return None
    return n if n > 0 else None


class ProductRepository:
    """Manages product data operations."""

    @staticmethod
    def list_all(catalog: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Get all products from catalog, sorted by name."""
        products = catalog.get("products", [])
        if not isinstance(products, list):
            return []

        items = [p for p in products if isinstance(p, dict) and p.get("id")]
        return sorted(items, key=lambda x: (str(x.get("name") or "").casefold(), str(x.get("id"))))

    @staticmethod
    def get_by_id(catalog: Dict[str, Any], product_id: str) -> Optional[Dict[str, Any]]:
        """Get product by ID."""
        for p in ProductRepository.list_all(catalog):
            if str(p.get("id")) == str(product_id):
                return p
        return None

    @staticmethod
    def by_id(catalog: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """product_id -> product, for calculator lookups."""
        return {str(p["id"]): p for p in ProductRepository.list_all(catalog)}

    @staticmethod
    def stock_map(catalog: Dict[str, Any]) -> Dict[str, int]:
        """product_id -> current stock in pieces."""
        return {
            str(p["id"]): int(p.get("stock", 0) or 0)
            for p in ProductRepository.list_all(catalog)
        }

    @staticmethod
    def normalize(payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Coerce a product payload into the stored shape.

        Raises:
            ValueError: missing name or negative numbers
        """
        name = str(payload.get("name") or "").strip()
        if not name:
            raise ValueError("Product name is required.")

        record = dict(payload)
        record["name"] = name
        record["category"] = str(payload.get("category") or "").strip()
        record["supplier_id"] = payload.get("supplier_id") or None
        record["purchase_price"] = float(payload.get("purchase_price", 0) or 0)
        record["sale_price"] = float(payload.get("sale_price", 0) or 0)
        record["stock"] = int(payload.get("stock", 0) or 0)
        record["min_stock"] = int(payload.get("min_stock", 0) or 0)
        record["pieces_per_pack"] = _int_or_none(payload.get("pieces_per_pack"))
        record["packs_per_carton"] = _int_or_none(payload.get("packs_per_carton"))
        record["avg_purchase_price"] = float(
            payload.get("avg_purchase_price") or record["purchase_price"]
        )

        for field in ("purchase_price", "sale_price", "stock", "min_stock"):
            if record[field] < 0:
                raise ValueError(f"{field.replace('_', ' ').capitalize()} cannot be negative.")
        return record

    @staticmethod
    def upsert(
        catalog: Dict[str, Any],
        payload: Dict[str, Any],
        user: Optional[str] = None,
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Update or insert a product, logging creation, price and stock changes.

        Returns:
            (updated_catalog, was_new)
        """
        updated = json.loads(json.dumps(catalog))
        products = updated.get("products")
        if not isinstance(products, list):
            products = []
            updated["products"] = products

        record = ProductRepository.normalize(payload)
        product_id = str(record.get("id") or "")

        existing_idx = next(
            (i for i, p in enumerate(products) if isinstance(p, dict) and str(p.get("id")) == product_id and product_id),
            None,
        )

        if existing_idx is None:
            if not product_id:
                record["id"] = generate_unique_id(
                    record["name"], (str(p.get("id")) for p in products if isinstance(p, dict)), prefix="prod-"
                )
            record["created_at"] = record.get("created_at") or now_iso()
            record["updated_at"] = record["created_at"]
            products.append(record)
            ActivityRepository.append(
                updated,
                "product_create",
                f"New product: {record['name']} (opening stock: {record['stock']})",
                user,
            )
            return updated, True

        old = products[existing_idx]
        record["created_at"] = old.get("created_at") or now_iso()
        record["updated_at"] = now_iso()
        products[existing_idx] = record

        old_stock = int(old.get("stock", 0) or 0)
        if old_stock != record["stock"]:
            diff = record["stock"] - old_stock
            ActivityRepository.append(
                updated,
                "adjustment",
                f"Stock {record['name']} {'+' if diff > 0 else '-'}{abs(diff)} ({old_stock} -> {record['stock']})",
                user,
            )

        changes = []
        for field, label in (("purchase_price", "Purchase price"), ("sale_price", "Sale price")):
            before = float(old.get(field, 0) or 0)
            if before != record[field]:
                changes.append(f"{label}: {before:,.0f} -> {record[field]:,.0f}")
        if changes:
            ActivityRepository.append(updated, "price_change", f"{record['name']} - {', '.join(changes)}", user)

        return updated, False

    @staticmethod
    def delete(catalog: Dict[str, Any], product_id: str) -> Dict[str, Any]:
        """Delete product by ID. Bundles referencing it are left untouched."""
        updated = json.loads(json.dumps(catalog))
        products = updated.get("products", [])

        if isinstance(products, list):
            updated["products"] = [
                p for p in products
                if not (isinstance(p, dict) and str(p.get("id", "")) == str(product_id))
            ]

        return updated
