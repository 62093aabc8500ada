"""
Configuration manager - Facade for storage, repository and calculator layers.

Mutating operations always re-fetch the catalog right before applying a change
and persist it straight after, so stock decisions are never made on a stale
snapshot held by the UI.
"""

from __future__ import annotations
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from inventory.calculators import BundleAvailabilityCalculator, MarginCalculator, StockMetrics
from .permissions import with_admin_permissions
from .repositories import (
    BundleRepository,
    LedgerRepository,
    ProductRepository,
    SupplierRepository,
)
from .storage import StorageManager


# ============================================================================
# Module-level storage instance (singleton pattern)
# ============================================================================
_storage: Optional[StorageManager] = None


def _get_storage() -> StorageManager:
    """Get or create storage manager instance."""
    global _storage
    if _storage is None:
        _storage = StorageManager()
    return _storage


def set_storage(storage: Optional[StorageManager]) -> None:
    """Swap the storage backend (tests, tools). None resets to the default."""
    global _storage
    _storage = storage


# ============================================================================
# Public API - Load/Save
# ============================================================================

def load_catalog() -> Dict[str, Any]:
    """
    Load catalog from storage (Gist -> Local fallback).

    Returns:
        Catalog dict with products, bundles, suppliers and ledgers
    """
    return _get_storage().load()


def save_catalog(data: Dict[str, Any]) -> Path:
    """
    Save catalog to storage (Gist + Local).

    Returns:
        Path to local file
    """
    return _get_storage().save(data)


def get_catalog_path() -> Path:
    """Get path to local catalog file."""
    return _get_storage().get_path()


def catalog_mtime() -> str:
    """Get last modification time of catalog."""
    return _get_storage().get_mtime()


def get_last_warning() -> Optional[str]:
    """Get last warning message (for UI display)."""
    return _get_storage().get_last_warning()


def storage_source() -> str:
    """Where the last load came from: 'gist' or 'local'."""
    return _get_storage().source


# ============================================================================
# Read helpers
# ============================================================================

def list_products(catalog: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """List all products."""
    return ProductRepository.list_all(catalog if catalog is not None else load_catalog())


def list_bundles(catalog: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """List all bundles."""
    return BundleRepository.list_all(catalog if catalog is not None else load_catalog())


def list_suppliers(catalog: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """List all suppliers."""
    return SupplierRepository.list_all(catalog if catalog is not None else load_catalog())


def bundle_availability(bundle_id: str, catalog: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Availability of one bundle against current stock.

    Raises:
        ValueError: unknown bundle
    """
    catalog = catalog if catalog is not None else load_catalog()
    bundle = BundleRepository.get_by_id(catalog, bundle_id)
    if bundle is None:
        raise ValueError(f"Bundle '{bundle_id}' not found.")
    return BundleAvailabilityCalculator.evaluate(bundle.get("items") or [], ProductRepository.stock_map(catalog))


def margin_report(
    start: Optional[date] = None,
    end: Optional[date] = None,
    catalog: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Margin and realized profit for sales in [start, end].

    Malformed sale records are excluded from the figures and returned under
    'rejected' so the page can show them.
    """
    catalog = catalog if catalog is not None else load_catalog()
    lines = LedgerRepository.sale_lines(catalog, start, end)
    valid, rejected = MarginCalculator.partition_lines(lines)
    report = MarginCalculator.aggregate(
        valid, ProductRepository.by_id(catalog), BundleRepository.by_id(catalog)
    )
    report["rejected"] = [e.line for e in rejected]
    return report


def dashboard_summary(month: Optional[str] = None, catalog: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Dashboard totals for a 'YYYY-MM' month."""
    return StockMetrics.summarize(catalog if catalog is not None else load_catalog(), month)


# ============================================================================
# Mutations (fresh load -> apply -> save)
# ============================================================================

def record_stock_in(product_id: str, quantity: int, purchase_price: float, **kwargs: Any) -> Dict[str, Any]:
    """Receive stock. Extra kwargs go to LedgerRepository.record_stock_in."""
    updated, record = LedgerRepository.record_stock_in(
        load_catalog(), product_id, quantity, purchase_price, **kwargs
    )
    save_catalog(updated)
    return record


def record_stock_out(item_type: str, item_id: str, quantity: int, **kwargs: Any) -> Dict[str, Any]:
    """Record a sale. Extra kwargs go to LedgerRepository.record_stock_out."""
    updated, record = LedgerRepository.record_stock_out(
        load_catalog(), item_type, item_id, quantity, **kwargs
    )
    save_catalog(updated)
    return record


def adjust_stock(product_id: str, new_stock: int, reason: str, user: Optional[str] = None) -> Dict[str, Any]:
    """Correct a product's stock."""
    updated, record = LedgerRepository.adjust_stock(load_catalog(), product_id, new_stock, reason, user)
    save_catalog(updated)
    return record


def save_product(payload: Dict[str, Any], user: Optional[str] = None) -> bool:
    """Insert or update a product. Returns True if it was new."""
    updated, was_new = ProductRepository.upsert(load_catalog(), payload, user)
    save_catalog(updated)
    return was_new


def save_bundle(payload: Dict[str, Any], user: Optional[str] = None) -> bool:
    """Insert or update a bundle. Returns True if it was new."""
    updated, was_new = BundleRepository.upsert(load_catalog(), payload, user)
    save_catalog(updated)
    return was_new


def add_supplier(payload: Dict[str, Any]) -> str:
    """Add a supplier and return its id."""
    updated, supplier_id = SupplierRepository.add(load_catalog(), payload)
    save_catalog(updated)
    return supplier_id


def set_admin_permissions(flags: Dict[str, bool]) -> None:
    """Persist admin page permissions."""
    save_catalog(with_admin_permissions(load_catalog(), flags))
