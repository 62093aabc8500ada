# tools/products_xlsx_to_json.py
"""
Import a product sheet into the catalog.

Expected columns (first sheet, header row):
    name, category, supplier, purchase_price, sale_price, stock, min_stock,
    pieces_per_pack, packs_per_carton

Existing products (matched by name, case-insensitive) are updated; new ones
are added. Run from project root:
    python tools/products_xlsx_to_json.py data/products.xlsx
"""

from __future__ import annotations
import sys
from pathlib import Path
from typing import Any, Dict, Tuple

import pandas as pd

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from services.repositories import ProductRepository, SupplierRepository  # noqa: E402

XLSX_PATH = Path("data/products.xlsx")

NUMERIC_COLUMNS = ("purchase_price", "sale_price", "stock", "min_stock", "pieces_per_pack", "packs_per_carton")


def _cell(row: pd.Series, column: str) -> Any:
    if column not in row.index or pd.isna(row[column]):
        return None
    value = row[column]
    return value.strip() if isinstance(value, str) else value


def import_products(df: pd.DataFrame, catalog: Dict[str, Any], user: str = "import") -> Tuple[Dict[str, Any], int, int]:
    """
    Upsert every sheet row into the catalog.

    Returns:
        (updated_catalog, created_count, updated_count)
    """
    df = df.rename(columns=lambda c: str(c).strip().lower().replace(" ", "_"))
    created = updated_count = 0

    for _, row in df.iterrows():
        name = _cell(row, "name")
        if not name or str(name).lower() == "nan":
            continue

        payload: Dict[str, Any] = {"name": str(name)}
        category = _cell(row, "category")
        if category:
            payload["category"] = str(category)
        for col in NUMERIC_COLUMNS:
            value = _cell(row, col)
            if value is not None:
                payload[col] = value

        supplier_name = _cell(row, "supplier")
        if supplier_name:
            supplier = SupplierRepository.get_by_name(catalog, str(supplier_name))
            if supplier is None:
                catalog, supplier_id = SupplierRepository.add(catalog, {"name": str(supplier_name)})
            else:
                supplier_id = supplier["id"]
            payload["supplier_id"] = supplier_id

        existing = next(
            (p for p in ProductRepository.list_all(catalog) if str(p.get("name", "")).casefold() == str(name).casefold()),
            None,
        )
        if existing:
            payload = {**existing, **payload, "name": existing["name"]}

        catalog, was_new = ProductRepository.upsert(catalog, payload, user)
        if was_new:
            created += 1
        else:
            updated_count += 1

    return catalog, created, updated_count


if __name__ == "__main__":
    from services.config_manager import load_catalog, save_catalog

    xlsx_path = Path(sys.argv[1]) if len(sys.argv) > 1 else XLSX_PATH
    frame = pd.read_excel(xlsx_path, engine="openpyxl")
    result, n_new, n_upd = import_products(frame, load_catalog())
    path = save_catalog(result)
    print(f"✅ Imported {n_new} new / {n_upd} updated products into {path}")
