"""Export modules for reports."""

from .excel_exporter import build_report_workbook, export_to_excel

__all__ = ["build_report_workbook", "export_to_excel"]
