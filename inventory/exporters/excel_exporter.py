"""Excel export functionality."""

from __future__ import annotations
from io import BytesIO
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd
import streamlit as st

from services.utils.id_generator import slugify

# Excel caps sheet names at 31 characters.
_SHEET_NAME_MAX = 31


def build_report_workbook(sheets: Mapping[str, List[Dict[str, Any]]]) -> bytes:
    """
    Build an .xlsx workbook, one sheet per report.

    Args:
        sheets: sheet name -> list of row dicts (column order from the first row)

    Returns:
        Workbook bytes
    """
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as xw:
        for name, rows in sheets.items():
            sheet = (name or "Sheet")[:_SHEET_NAME_MAX]
            df = pd.DataFrame(rows)
            df.to_excel(xw, index=False, sheet_name=sheet)
            ws = xw.sheets[sheet]
            for col, header in enumerate(df.columns):
                width = max([len(str(header))] + [len(str(v)) for v in df[header].tolist()])
                ws.set_column(col, col, min(max(width + 2, 10), 48))
    return buf.getvalue()


def export_to_excel(
    sheets: Mapping[str, List[Dict[str, Any]]],
    report_title: str,
    key: Optional[str] = None,
) -> None:
    """Render Excel download button."""
    calc_id = datetime.now().strftime("%Y%m%d-%H%M%S")
    st.download_button(
        "Download Excel",
        data=build_report_workbook(sheets),
        file_name=f"stokpro_{slugify(report_title, 'report')}_{calc_id}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        use_container_width=True,
        key=key,
    )
