from datetime import date

import pytest

from services import config_manager
from services.repositories import InsufficientStock


@pytest.fixture
def saved(storage, catalog):
    storage.save(catalog)
    return storage


class TestReads:
    def test_lists(self, saved):
        assert [p["id"] for p in config_manager.list_products()] == ["B", "C", "A"]
        assert [b["id"] for b in config_manager.list_bundles()] == ["bun-1"]
        assert config_manager.list_suppliers()[0]["id"] == "sup-1"

    def test_bundle_availability(self, saved):
        result = config_manager.bundle_availability("bun-1")
        assert result["max_assemblable"] == 3
        with pytest.raises(ValueError):
            config_manager.bundle_availability("missing")

    def test_margin_report_surfaces_rejected_lines(self, saved, catalog):
        catalog["stock_out"].append({"id": "bad", "item_id": "A", "quantity": 2, "total_price": 10000,
                                     "date": "2024-12-22"})
        report = config_manager.margin_report(date(2024, 12, 1), date(2024, 12, 31), catalog=catalog)
        assert report["totals"]["total_revenue"] == 205000
        assert [line["source_id"] for line in report["rejected"]] == ["bad"]

    def test_dashboard_summary(self, saved):
        assert config_manager.dashboard_summary("2024-12")["monthly_stock_out"] == 34


class TestMutations:
    def test_stock_out_is_persisted(self, saved):
        record = config_manager.record_stock_out("bundle", "bun-1", 1, user="Admin")
        catalog = config_manager.load_catalog()
        assert catalog["stock_out"][-1]["id"] == record["id"]
        stock = {p["id"]: p["stock"] for p in catalog["products"]}
        assert stock["A"] == 8
        assert stock["B"] == 2

    def test_failed_stock_out_saves_nothing(self, saved):
        with pytest.raises(InsufficientStock):
            config_manager.record_stock_out("product", "B", 99)
        assert len(config_manager.load_catalog()["stock_out"]) == 2

    def test_stock_in_and_adjust(self, saved):
        config_manager.record_stock_in("C", 1, 2000, unit="pack")
        config_manager.adjust_stock("C", 50, "recount")
        catalog = config_manager.load_catalog()
        assert next(p for p in catalog["products"] if p["id"] == "C")["stock"] == 50
        assert len(catalog["adjustments"]) == 1

    def test_catalog_edits(self, saved):
        assert config_manager.save_product({"name": "Beng Beng", "sale_price": 2000}) is True
        assert config_manager.save_bundle({"name": "Mini", "items": [{"product_id": "B", "quantity": 1}]}) is True
        assert config_manager.add_supplier({"name": "CV Makmur"}) == "sup-cv_makmur"
        config_manager.set_admin_permissions({"reports": True})
        settings = config_manager.load_catalog()["settings"]
        assert settings["admin_permissions"]["reports"] is True
        assert settings["admin_permissions"]["dashboard"] is True

    def test_storage_details(self, saved, tmp_path):
        assert config_manager.get_catalog_path() == tmp_path / "catalog.json"
        assert config_manager.catalog_mtime() != "(not created yet)"
        assert config_manager.get_last_warning() is None
        assert config_manager.storage_source() == "local"
