"""Supplier repository - handles supplier data operations."""

from __future__ import annotations
import json
from typing import Any, Dict, List, Optional, Tuple

from services.utils.dates import now_iso
from services.utils.id_generator import generate_unique_id


class SupplierRepository:
    """Manages supplier data operations."""
    
    @staticmethod
    def list_all(catalog: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Get all suppliers, sorted by name."""
        suppliers = catalog.get("suppliers", [])
        if not isinstance(suppliers, list):
            return []
        items = [s for s in suppliers if isinstance(s, dict) and s.get("id")]
        return sorted(items, key=lambda x: str(x.get("name") or "").casefold())
    
    @staticmethod
    def get_by_id(catalog: Dict[str, Any], supplier_id: str) -> Optional[Dict[str, Any]]:
        """Get supplier by ID."""
        for s in SupplierRepository.list_all(catalog):
            if str(s.get("id")) == str(supplier_id):
                return s
        return None
    
    @staticmethod
    def get_by_name(catalog: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
        """Get supplier by name (case-insensitive)."""
        wanted = (name or "").strip().casefold()
        for s in SupplierRepository.list_all(catalog):
            if str(s.get("name", "")).strip().casefold() == wanted:
                return s
        return None
    
    @staticmethod
    def add(catalog: Dict[str, Any], payload: Dict[str, Any]) -> Tuple[Dict[str, Any], str]:
        """
        Add a supplier.
        
        Returns:
            (updated_catalog, supplier_id)
            
        Raises:
            ValueError: missing or duplicate name
        """
        name = str(payload.get("name") or "").strip()
        if not name:
            raise ValueError("Supplier name is required.")
        if SupplierRepository.get_by_name(catalog, name):
            raise ValueError(f"Supplier '{name}' already exists.")
        
        updated = json.loads(json.dumps(catalog))
        suppliers = updated.get("suppliers")
        if not isinstance(suppliers, list):
            suppliers = []
            updated["suppliers"] = suppliers
        
        supplier_id = generate_unique_id(
            name, (str(s.get("id")) for s in suppliers if isinstance(s, dict)), prefix="sup-"
        )
        suppliers.append({
            "id": supplier_id,
            "name": name,
            "contact": str(payload.get("contact") or "").strip(),
            "address": str(payload.get("address") or "").strip(),
            "created_at": now_iso(),
        })
        return updated, supplier_id
