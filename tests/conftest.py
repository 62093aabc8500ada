"""Shared fixtures: a small catalog and an isolated storage backend."""

import copy

import pytest

from services import config_manager
from services.storage import GistStorage, StorageManager

_CATALOG = {
    "products": [
        {"id": "A", "name": "Taro", "purchase_price": 3000, "sale_price": 5000, "avg_purchase_price": 3000,
         "stock": 10, "min_stock": 5, "pieces_per_pack": 12, "packs_per_carton": 10, "supplier_id": "sup-1"},
        {"id": "B", "name": "Krisbee", "purchase_price": 2500, "sale_price": 4500, "avg_purchase_price": 2500,
         "stock": 3, "min_stock": 5, "pieces_per_pack": None, "packs_per_carton": None, "supplier_id": "sup-1"},
        {"id": "C", "name": "Milkita", "purchase_price": 0, "sale_price": 2500, "avg_purchase_price": 0,
         "stock": 40, "min_stock": 40, "pieces_per_pack": 12, "packs_per_carton": None},
    ],
    "bundles": [
        {"id": "bun-1", "name": "Goodiebag", "category": "goodiebag", "sale_price": 15000,
         "items": [{"product_id": "A", "quantity": 2}, {"product_id": "B", "quantity": 1}]},
    ],
    "suppliers": [
        {"id": "sup-1", "name": "PT Snack Indonesia", "contact": "", "address": ""},
    ],
    "stock_in": [
        {"id": "sin-1", "product_id": "A", "quantity": 100, "purchase_price": 3000, "total_price": 300000,
         "date": "2024-12-01"},
        {"id": "sin-2", "product_id": "B", "quantity": 20, "purchase_price": 2500, "total_price": 50000,
         "date": "2024-11-03"},
    ],
    "stock_out": [
        {"id": "sout-1", "type": "product", "item_id": "A", "quantity": 30, "sale_price": 5000,
         "total_price": 150000, "additional_cost": 0, "date": "2024-12-18"},
        {"id": "sout-2", "type": "bundle", "item_id": "bun-1", "quantity": 4, "sale_price": 15000,
         "total_price": 60000, "additional_cost": 5000, "date": "2024-12-20"},
    ],
    "adjustments": [],
    "activity_logs": [],
    "settings": {},
}


@pytest.fixture
def catalog():
    return copy.deepcopy(_CATALOG)


@pytest.fixture
def storage(tmp_path):
    gist = GistStorage(gist_id="unused", token="unused")
    gist.disable()
    manager = StorageManager(local_path=tmp_path / "catalog.json", gist=gist)
    config_manager.set_storage(manager)
    yield manager
    config_manager.set_storage(None)
