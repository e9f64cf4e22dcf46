"""Delivery table services: dock metrics, sorting, filtering and views."""

from .board import (
    DeliveryRow,
    DockReport,
    TableQuery,
    TableView,
    apply_status_change,
    build_dock_report,
    build_rows,
    build_table_view,
    parse_filters,
    remove_record,
)
from .filtering import apply_filters, display_value, distinct_values
from .metrics import DEFAULT_OVERDUE_THRESHOLD_DAYS, days_at_dock, is_overdue, parse_timestamp
from .sorting import compare_values, next_sort_state, sort_by_status, sort_records

__all__ = [
    "DEFAULT_OVERDUE_THRESHOLD_DAYS",
    "DeliveryRow",
    "DockReport",
    "TableQuery",
    "TableView",
    "apply_filters",
    "apply_status_change",
    "build_dock_report",
    "build_rows",
    "build_table_view",
    "compare_values",
    "days_at_dock",
    "display_value",
    "distinct_values",
    "is_overdue",
    "next_sort_state",
    "parse_filters",
    "parse_timestamp",
    "remove_record",
    "sort_by_status",
    "sort_records",
]
