from datetime import date

from inventory.calculators import StockMetrics


class TestLowStock:
    def test_rows_and_order(self, catalog):
        rows = StockMetrics.low_stock(catalog["products"])
        assert [r["product_id"] for r in rows] == ["B", "C"]
        assert rows[0]["critical"] is True
        assert rows[0]["fill_pct"] == 60.0
        assert rows[1]["critical"] is False
        assert rows[1]["fill_pct"] == 100.0


class TestSummarize:
    def test_month_totals(self, catalog):
        summary = StockMetrics.summarize(catalog, "2024-12")
        assert summary["total_products"] == 3
        assert summary["total_stock"] == 53
        assert summary["total_asset_value"] == 37500
        assert summary["low_stock_count"] == 2
        assert summary["monthly_stock_in"] == 100
        assert summary["monthly_stock_out"] == 34
        assert summary["monthly_revenue"] == 205000
        assert summary["monthly_profit"] == 81000
        assert summary["rejected_lines"] == 0

    def test_other_month_is_empty(self, catalog):
        summary = StockMetrics.summarize(catalog, "2023-01")
        assert summary["monthly_stock_in"] == 0
        assert summary["monthly_revenue"] == 0

    def test_counts_rejected_lines(self, catalog):
        catalog["stock_out"].append({"id": "bad", "type": "", "item_id": "A", "quantity": 1,
                                     "total_price": 5000, "date": "2024-12-21"})
        summary = StockMetrics.summarize(catalog, "2024-12")
        assert summary["rejected_lines"] == 1
        assert summary["monthly_revenue"] == 205000


class TestStockFlow:
    def test_buckets_oldest_first(self, catalog):
        flow = StockMetrics.stock_flow(catalog["stock_in"], catalog["stock_out"], months=2, today=date(2024, 12, 31))
        assert flow == [
            {"month": "2024-11", "label": "Nov 2024", "stock_in": 20, "stock_out": 0},
            {"month": "2024-12", "label": "Dec 2024", "stock_in": 100, "stock_out": 34},
        ]

    def test_crosses_year_boundary(self):
        flow = StockMetrics.stock_flow([], [], months=3, today=date(2025, 1, 10))
        assert [f["month"] for f in flow] == ["2024-11", "2024-12", "2025-01"]


class TestTopProducts:
    def test_bundle_sales_count_toward_components(self, catalog):
        products = {p["id"]: p for p in catalog["products"]}
        bundles = {b["id"]: b for b in catalog["bundles"]}
        rows = StockMetrics.top_products(catalog["stock_out"], bundles, products)
        assert rows == [
            {"product_id": "A", "name": "Taro", "sold": 38},
            {"product_id": "B", "name": "Krisbee", "sold": 4},
        ]

    def test_limit(self, catalog):
        products = {p["id"]: p for p in catalog["products"]}
        bundles = {b["id"]: b for b in catalog["bundles"]}
        assert len(StockMetrics.top_products(catalog["stock_out"], bundles, products, limit=1)) == 1


class TestBundleOverview:
    def test_one_row_per_bundle(self, catalog):
        rows = StockMetrics.bundle_overview(catalog["bundles"], {"A": 10, "B": 3})
        assert rows[0]["bundle_id"] == "bun-1"
        assert rows[0]["max_assemblable"] == 3
