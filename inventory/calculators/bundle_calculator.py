"""Bundle availability calculator - Pure calculation logic."""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional


class BundleAvailabilityCalculator:
    """Answers "can this bundle be assembled now, and at most how many"."""

    @staticmethod
    def _required(component: Mapping[str, Any]) -> int:
        required = int(component.get("quantity") or 0)
        if required <= 0:
            raise ValueError(
                f"Bundle component {component.get('product_id')!r} must require at least 1 piece"
            )
        return required

    @staticmethod
    def merged_requirements(components: Iterable[Mapping[str, Any]]) -> Dict[Any, int]:
        """
        product_id -> pieces per bundle, in first-mention order.

        A recipe listing the same product twice needs the sum of both rows.
        """
        merged: Dict[Any, int] = {}
        for comp in components:
            product_id = comp.get("product_id")
            merged[product_id] = merged.get(product_id, 0) + BundleAvailabilityCalculator._required(comp)
        return merged

    @staticmethod
    def evaluate(
        components: Iterable[Mapping[str, Any]],
        current_stock: Mapping[str, int],
    ) -> Dict[str, Any]:
        """
        Evaluate a bundle recipe against current stock.

        Args:
            components: [{"product_id": ..., "quantity": required pieces per bundle}];
                rows naming the same product are summed
            current_stock: product_id -> pieces; missing products count as 0

        Returns:
            Dict with available, limiting_product_id, max_assemblable and a
            per-component breakdown
        """
        breakdown: List[Dict[str, Any]] = []
        limiting_id: Optional[str] = None
        max_count: Optional[int] = None

        for product_id, required in BundleAvailabilityCalculator.merged_requirements(components).items():
            stock = int(current_stock.get(product_id, 0) or 0)
            possible = max(0, stock) // required

            breakdown.append({
                "product_id": product_id,
                "required": required,
                "stock": stock,
                "possible": possible,
                "sufficient": stock >= required,
            })

            # strict '<' keeps the first component on ties
            if max_count is None or possible < max_count:
                max_count = possible
                limiting_id = product_id

        if not breakdown:
            return {
                "available": True,
                "limiting_product_id": None,
                "max_assemblable": 0,
                "components": [],
            }

        return {
            "available": all(row["sufficient"] for row in breakdown),
            "limiting_product_id": limiting_id,
            "max_assemblable": int(max_count or 0),
            "components": breakdown,
        }

    @staticmethod
    def cost_price(
        components: Iterable[Mapping[str, Any]],
        products: Mapping[str, Mapping[str, Any]],
    ) -> float:
        """
        Derived bundle cost: sum of quantity * component purchase price.

        Always recomputed from current product prices; a product missing from
        the catalog costs 0.
        """
        total = 0.0
        for comp in components:
            product = products.get(comp.get("product_id")) or {}
            total += BundleAvailabilityCalculator._required(comp) * float(product.get("purchase_price", 0.0) or 0.0)
        return total
