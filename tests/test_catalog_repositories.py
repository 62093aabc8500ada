import pytest

from services.repositories import (
    ActivityRepository,
    BundleRepository,
    ProductRepository,
    SupplierRepository,
)


class TestProductRepository:
    def test_list_sorted_by_name(self, catalog):
        assert [p["name"] for p in ProductRepository.list_all(catalog)] == ["Krisbee", "Milkita", "Taro"]

    def test_insert_generates_id(self, catalog):
        updated, was_new = ProductRepository.upsert(catalog, {"name": "Hello Panda", "stock": 12, "pieces_per_pack": 0})
        assert was_new is True
        product = ProductRepository.get_by_id(updated, "prod-hello_panda")
        assert product["pieces_per_pack"] is None
        assert product["avg_purchase_price"] == 0.0
        assert updated["activity_logs"][-1]["type"] == "product_create"
        assert ProductRepository.get_by_id(catalog, "prod-hello_panda") is None

    def test_update_logs_price_and_stock_changes(self, catalog):
        payload = dict(ProductRepository.get_by_id(catalog, "A"), sale_price=5500, stock=12)
        updated, was_new = ProductRepository.upsert(catalog, payload, user="Owner")
        assert was_new is False
        types = [e["type"] for e in updated["activity_logs"]]
        assert types == ["adjustment", "price_change"]
        assert ProductRepository.get_by_id(updated, "A")["sale_price"] == 5500

    def test_negative_numbers_rejected(self):
        with pytest.raises(ValueError):
            ProductRepository.normalize({"name": "X", "sale_price": -1})

    def test_stock_map(self, catalog):
        assert ProductRepository.stock_map(catalog) == {"A": 10, "B": 3, "C": 40}

    def test_delete(self, catalog):
        updated = ProductRepository.delete(catalog, "C")
        assert "C" not in ProductRepository.by_id(updated)


class TestBundleRepository:
    def test_normalize_merges_duplicates(self):
        items = [{"product_id": "A", "quantity": 1}, {"product_id": "B", "quantity": 1}, {"product_id": "A", "quantity": 2}]
        assert BundleRepository.normalize_items(items) == [
            {"product_id": "A", "quantity": 3},
            {"product_id": "B", "quantity": 1},
        ]

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValueError):
            BundleRepository.normalize_items([{"product_id": "A", "quantity": 0}])

    def test_insert_and_update(self, catalog):
        updated, was_new = BundleRepository.upsert(
            catalog, {"name": "Hampers Lebaran", "category": "Hampers", "sale_price": 50000,
                      "items": [{"product_id": "A", "quantity": 5}]}
        )
        assert was_new is True
        bundle = BundleRepository.get_by_id(updated, "bun-hampers_lebaran")
        assert bundle["category"] == "hampers"

        updated, was_new = BundleRepository.upsert(updated, dict(bundle, sale_price=55000))
        assert was_new is False
        assert BundleRepository.get_by_id(updated, "bun-hampers_lebaran")["sale_price"] == 55000

    def test_unknown_category(self, catalog):
        with pytest.raises(ValueError):
            BundleRepository.upsert(catalog, {"name": "X", "category": "parcel"})


class TestSupplierRepository:
    def test_add(self, catalog):
        updated, supplier_id = SupplierRepository.add(catalog, {"name": "CV Makmur", "contact": " 0812 "})
        assert supplier_id == "sup-cv_makmur"
        assert SupplierRepository.get_by_id(updated, supplier_id)["contact"] == "0812"

    def test_duplicate_name_rejected(self, catalog):
        with pytest.raises(ValueError):
            SupplierRepository.add(catalog, {"name": "pt snack indonesia"})


class TestActivityRepository:
    def test_unknown_type(self, catalog):
        with pytest.raises(ValueError):
            ActivityRepository.append(catalog, "login", "nope")

    def test_list_recent_newest_first(self, catalog):
        catalog["activity_logs"] = [
            {"id": "1", "timestamp": "2024-12-01T10:00:00Z"},
            {"id": "2", "timestamp": "2024-12-02T10:00:00Z"},
        ]
        assert [e["id"] for e in ActivityRepository.list_recent(catalog, limit=1)] == ["2"]
