from datetime import date

import pytest

from inventory.calculators import UnsupportedUnit
from services.repositories import InsufficientStock, LedgerRepository


def _product(catalog, product_id):
    return next(p for p in catalog["products"] if p["id"] == product_id)


class TestStockIn:
    def test_converts_units_and_averages_cost(self, catalog):
        updated, record = LedgerRepository.record_stock_in(catalog, "A", 2, 3600, unit="pack", when="2024-12-05")
        product = _product(updated, "A")
        assert product["stock"] == 34
        assert product["avg_purchase_price"] == 3423.53
        assert product["purchase_price"] == 3000
        assert record["quantity"] == 24
        assert record["unit"] == "pack"
        assert record["entered_quantity"] == 2
        assert record["total_price"] == 86400
        assert record["date"] == "2024-12-05"
        assert record["supplier_id"] == "sup-1"
        assert updated["stock_in"][-1] == record
        assert updated["activity_logs"][-1]["type"] == "stock_in"

    def test_does_not_touch_input(self, catalog):
        LedgerRepository.record_stock_in(catalog, "A", 5, 3000)
        assert _product(catalog, "A")["stock"] == 10
        assert len(catalog["stock_in"]) == 2

    def test_unit_not_offered(self, catalog):
        with pytest.raises(UnsupportedUnit):
            LedgerRepository.record_stock_in(catalog, "B", 1, 2500, unit="pack")

    @pytest.mark.parametrize("product_id, qty, price", [("X", 1, 100), ("A", 0, 100), ("A", 1, -1)])
    def test_invalid_input(self, catalog, product_id, qty, price):
        with pytest.raises(ValueError):
            LedgerRepository.record_stock_in(catalog, product_id, qty, price)


class TestStockOut:
    def test_product_sale(self, catalog):
        updated, record = LedgerRepository.record_stock_out(catalog, "product", "A", 4, when=date(2024, 12, 24))
        assert _product(updated, "A")["stock"] == 6
        assert record["total_price"] == 20000
        assert record["margin"] == 8000
        assert record["date"] == "2024-12-24"

    def test_product_insufficient(self, catalog):
        with pytest.raises(InsufficientStock) as exc:
            LedgerRepository.record_stock_out(catalog, "product", "A", 11)
        assert exc.value.product_id == "A"
        assert exc.value.available == 10

    def test_bundle_consumes_components(self, catalog):
        updated, record = LedgerRepository.record_stock_out(catalog, "bundle", "bun-1", 2, additional_cost=1000)
        assert _product(updated, "A")["stock"] == 6
        assert _product(updated, "B")["stock"] == 1
        assert record["total_price"] == 30000
        assert record["margin"] == 12000

    def test_bundle_insufficient_names_limiting_product(self, catalog):
        with pytest.raises(InsufficientStock) as exc:
            LedgerRepository.record_stock_out(catalog, "bundle", "bun-1", 4)
        assert exc.value.product_id == "B"
        assert exc.value.requested == 4
        assert exc.value.available == 3

    def test_bundle_listing_a_product_twice_cannot_oversell(self, catalog):
        catalog["bundles"][0]["items"] = [{"product_id": "B", "quantity": 2}, {"product_id": "B", "quantity": 2}]
        with pytest.raises(InsufficientStock) as exc:
            LedgerRepository.record_stock_out(catalog, "bundle", "bun-1", 1)
        assert exc.value.product_id == "B"
        assert exc.value.requested == 4

    def test_bundle_duplicate_rows_deduct_their_sum(self, catalog):
        catalog["bundles"][0]["items"] = [{"product_id": "A", "quantity": 2}, {"product_id": "A", "quantity": 3}]
        updated, _ = LedgerRepository.record_stock_out(catalog, "bundle", "bun-1", 2)
        assert _product(updated, "A")["stock"] == 0

    def test_bundle_without_components(self, catalog):
        catalog["bundles"][0]["items"] = []
        with pytest.raises(ValueError):
            LedgerRepository.record_stock_out(catalog, "bundle", "bun-1", 1)

    @pytest.mark.parametrize("kind, item, qty, extra", [
        ("gift", "A", 1, 0),
        ("product", "A", 0, 0),
        ("product", "A", 1, -5),
        ("bundle", "bun-x", 1, 0),
    ])
    def test_invalid_input(self, catalog, kind, item, qty, extra):
        with pytest.raises(ValueError):
            LedgerRepository.record_stock_out(catalog, kind, item, qty, additional_cost=extra)


class TestAdjust:
    def test_sets_stock_and_logs(self, catalog):
        updated, record = LedgerRepository.adjust_stock(catalog, "A", 8, "damaged", user="Owner")
        assert _product(updated, "A")["stock"] == 8
        assert record["previous_stock"] == 10
        assert updated["activity_logs"][-1]["description"].endswith("-2 (damaged)")

    @pytest.mark.parametrize("stock, reason", [(-1, "count"), (5, "  ")])
    def test_rejects(self, catalog, stock, reason):
        with pytest.raises(ValueError):
            LedgerRepository.adjust_stock(catalog, "A", stock, reason)


class TestPeriod:
    def test_filter_by_period(self, catalog):
        records = LedgerRepository.filter_by_period(catalog["stock_in"], date(2024, 12, 1), date(2024, 12, 31))
        assert [r["id"] for r in records] == ["sin-1"]

    def test_undated_records_dropped(self):
        assert LedgerRepository.filter_by_period([{"id": "x"}]) == []

    def test_sale_lines(self, catalog):
        lines = LedgerRepository.sale_lines(catalog, date(2024, 12, 19), None)
        assert lines == [{"product_id": None, "bundle_id": "bun-1", "quantity": 4, "revenue": 55000.0,
                          "source_id": "sout-2"}]
