"""Repository layer for data access."""

from .activity_repository import ActivityRepository, ACTIVITY_TYPES
from .product_repository import ProductRepository
from .bundle_repository import BundleRepository, BUNDLE_CATEGORIES
from .supplier_repository import SupplierRepository
from .ledger_repository import LedgerRepository, InsufficientStock

__all__ = [
    "ActivityRepository",
    "ACTIVITY_TYPES",
    "ProductRepository",
    "BundleRepository",
    "BUNDLE_CATEGORIES",
    "SupplierRepository",
    "LedgerRepository",
    "InsufficientStock",
]
