"""Dock report exports."""

from .dock import CSV_COLUMNS, dock_report_to_csv

__all__ = ["CSV_COLUMNS", "dock_report_to_csv"]
