import pytest

from inventory.calculators import BundleAvailabilityCalculator

GOODIEBAG = [{"product_id": "A", "quantity": 2}, {"product_id": "B", "quantity": 1}]


class TestEvaluate:
    def test_limiting_component(self):
        result = BundleAvailabilityCalculator.evaluate(GOODIEBAG, {"A": 10, "B": 3})
        assert result["available"] is True
        assert result["max_assemblable"] == 3
        assert result["limiting_product_id"] == "B"
        assert [row["possible"] for row in result["components"]] == [5, 3]

    def test_empty_recipe(self):
        result = BundleAvailabilityCalculator.evaluate([], {"A": 10})
        assert result == {
            "available": True,
            "limiting_product_id": None,
            "max_assemblable": 0,
            "components": [],
        }

    def test_missing_product_counts_as_zero(self):
        result = BundleAvailabilityCalculator.evaluate(GOODIEBAG, {"A": 10})
        assert result["available"] is False
        assert result["max_assemblable"] == 0
        assert result["limiting_product_id"] == "B"
        assert result["components"][1]["stock"] == 0

    def test_tie_keeps_first_component(self):
        result = BundleAvailabilityCalculator.evaluate(GOODIEBAG, {"A": 6, "B": 3})
        assert result["max_assemblable"] == 3
        assert result["limiting_product_id"] == "A"

    def test_negative_stock_assembles_nothing(self):
        result = BundleAvailabilityCalculator.evaluate(GOODIEBAG, {"A": -4, "B": 3})
        assert result["max_assemblable"] == 0
        assert result["available"] is False

    def test_available_iff_at_least_one(self):
        for a in range(0, 7):
            for b in range(0, 4):
                result = BundleAvailabilityCalculator.evaluate(GOODIEBAG, {"A": a, "B": b})
                assert result["available"] == (result["max_assemblable"] >= 1)
                assert result["max_assemblable"] == min(a // 2, b)

    def test_duplicate_rows_are_summed(self):
        result = BundleAvailabilityCalculator.evaluate(
            [{"product_id": "B", "quantity": 2}, {"product_id": "A", "quantity": 1}, {"product_id": "B", "quantity": 2}],
            {"A": 10, "B": 3},
        )
        assert [row["product_id"] for row in result["components"]] == ["B", "A"]
        assert result["components"][0]["required"] == 4
        assert result["available"] is False
        assert result["max_assemblable"] == 0
        assert result["limiting_product_id"] == "B"

    def test_zero_required_quantity_rejected(self):
        with pytest.raises(ValueError):
            BundleAvailabilityCalculator.evaluate([{"product_id": "A", "quantity": 0}], {"A": 5})


class TestCostPrice:
    def test_sums_component_purchase_prices(self):
        products = {"A": {"purchase_price": 3000}, "B": {"purchase_price": 2500}}
        assert BundleAvailabilityCalculator.cost_price(GOODIEBAG, products) == 8500

    def test_follows_current_prices(self):
        products = {"A": {"purchase_price": 3000}, "B": {"purchase_price": 2500}}
        before = BundleAvailabilityCalculator.cost_price(GOODIEBAG, products)
        products["A"]["purchase_price"] = 3500
        assert BundleAvailabilityCalculator.cost_price(GOODIEBAG, products) == before + 1000

    def test_missing_product_costs_nothing(self):
        assert BundleAvailabilityCalculator.cost_price(GOODIEBAG, {"A": {"purchase_price": 3000}}) == 6000
