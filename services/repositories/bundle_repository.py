"""Bundle repository - handles bundle CRUD operations."""

from __future__ import annotations
import json
from typing import Any, Dict, List, Optional, Tuple

from services.utils.dates import now_iso
from services.utils.id_generator import generate_unique_id
from .activity_repository import ActivityRepository

BUNDLE_CATEGORIES = ("hampers", "goodiebag")


class BundleRepository:
    """Manages bundle data operations."""
    
    @staticmethod
    def list_all(catalog: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Get all bundles from catalog, sorted by name."""
        bundles = catalog.get("bundles", [])
        if not isinstance(bundles, list):
            return []
        
        items = [b for b in bundles if isinstance(b, dict) and b.get("id")]
        return sorted(items, key=lambda x: (str(x.get("name") or "").casefold(), str(x.get("id"))))
    
    @staticmethod
    def get_by_id(catalog: Dict[str, Any], bundle_id: str) -> Optional[Dict[str, Any]]:
        """Get bundle by ID."""
        for b in BundleRepository.list_all(catalog):
            if str(b.get("id")) == str(bundle_id):
                return b
        return None
    
    @staticmethod
    def by_id(catalog: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """bundle_id -> bundle, for calculator lookups."""
        return {str(b["id"]): b for b in BundleRepository.list_all(catalog)}
    
    @staticmethod
    def normalize_items(items: Any) -> List[Dict[str, Any]]:
        """
        Clean a recipe: merge duplicate products, keep order of first mention.
        
        Raises:
            ValueError: a component requires zero or fewer pieces
        """
        merged: Dict[str, int] = {}
        for item in items or []:
            if not isinstance(item, dict) or not item.get("product_id"):
                continue
            qty = int(item.get("quantity", 0) or 0)
            if qty <= 0:
                raise ValueError(f"Quantity for {item['product_id']} must be at least 1.")
            pid = str(item["product_id"])
            merged[pid] = merged.get(pid, 0) + qty
        return [{"product_id": pid, "quantity": qty} for pid, qty in merged.items()]
    
    @staticmethod
    def upsert(
        catalog: Dict[str, Any],
        payload: Dict[str, Any],
        user: Optional[str] = None,
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Update or insert a bundle.
        
        Returns:
            (updated_catalog, was_new)
        """
        name = str(payload.get("name") or "").strip()
        if not name:
            raise ValueError("Bundle name is required.")
        category = str(payload.get("category") or "goodiebag").strip().lower()
        if category not in BUNDLE_CATEGORIES:
            raise ValueError(f"Bundle category must be one of {', '.join(BUNDLE_CATEGORIES)}.")
        
        updated = json.loads(json.dumps(catalog))
        bundles = updated.get("bundles")
        if not isinstance(bundles, list):
            bundles = []
            updated["bundles"] = bundles
        
        record = dict(payload)
        record["name"] = name
        record["category"] = category
        record["sale_price"] = float(payload.get("sale_price", 0) or 0)
        record["items"] = BundleRepository.normalize_items(payload.get("items"))
        bundle_id = str(record.get("id") or "")
        
        for i, b in enumerate(bundles):
            if bundle_id and isinstance(b, dict) and str(b.get("id")) == bundle_id:
                record["created_at"] = b.get("created_at") or now_iso()
                record["updated_at"] = now_iso()
                bundles[i] = record
                return updated, False
        
        if not bundle_id:
            record["id"] = generate_unique_id(
                name, (str(b.get("id")) for b in bundles if isinstance(b, dict)), prefix="bun-"
            )
        record["created_at"] = now_iso()
        record["updated_at"] = record["created_at"]
        bundles.append(record)
        ActivityRepository.append(updated, "bundle_create", f"New bundle: {name}", user)
        return updated, True
    
    @staticmethod
    def delete(catalog: Dict[str, Any], bundle_id: str) -> Dict[str, Any]:
        """Delete bundle by ID."""
        updated = json.loads(json.dumps(catalog))
        bundles = updated.get("bundles", [])
        
        if isinstance(bundles, list):
            updated["bundles"] = [
                b for b in bundles
                if not (isinstance(b, dict) and str(b.get("id", "")) == str(bundle_id))
            ]
        
        return updated
