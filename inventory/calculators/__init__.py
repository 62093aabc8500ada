"""Calculator modules for stock, bundle and margin computations."""

from .unit_converter import Unit, UnitConverter, UnsupportedUnit, UNIT_LABELS
from .bundle_calculator import BundleAvailabilityCalculator
from .margin_calculator import MarginCalculator, MalformedLineItem
from .stock_metrics import StockMetrics

__all__ = [
    "Unit",
    "UnitConverter",
    "UnsupportedUnit",
    "UNIT_LABELS",
    "BundleAvailabilityCalculator",
    "MarginCalculator",
    "MalformedLineItem",
    "StockMetrics",
]
