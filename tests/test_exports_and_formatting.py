from io import BytesIO

import pandas as pd

from inventory.exporters import build_report_workbook
from inventory.ui.formatting import format_currency, format_pct


class TestWorkbook:
    def test_one_sheet_per_report(self):
        data = build_report_workbook({
            "Margin": [{"item_name": "Taro", "margin": 2000}, {"item_name": "Krisbee", "margin": 2000}],
            "A very long stock position sheet title": [{"product": "Taro", "stock": 10}],
        })
        sheets = pd.read_excel(BytesIO(data), sheet_name=None, engine="openpyxl")
        assert list(sheets) == ["Margin", "A very long stock position shee"]
        assert sheets["Margin"]["item_name"].tolist() == ["Taro", "Krisbee"]
        assert sheets["A very long stock position shee"]["stock"].tolist() == [10]


class TestFormatting:
    def test_currency(self):
        assert format_currency(25000) == "Rp 25.000"
        assert format_currency(-1500) == "-Rp 1.500"
        assert format_currency(None) == "Rp 0"
        assert format_currency("n/a") == "Rp 0"

    def test_pct(self):
        assert format_pct(66.666) == "66.67%"
        assert format_pct(None) == "0.00%"
