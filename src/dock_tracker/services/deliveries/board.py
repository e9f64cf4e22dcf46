"""Composes filters, sorting and dock metrics into table and report views.

The record collection is always passed in by the caller; nothing here keeps
state between calls, so every view is recomputed from the full collection.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence

from ...models.domain import DeliveryRecord, DeliveryStatus, RecordField, SortDirection
from .filtering import apply_filters, distinct_values
from .metrics import DEFAULT_OVERDUE_THRESHOLD_DAYS, days_at_dock, is_overdue
from .sorting import sort_by_status, sort_records


@dataclass(slots=True)
class DeliveryRow:
    record: DeliveryRecord
    days_at_dock: Optional[int]
    overdue: bool


@dataclass(slots=True)
class TableQuery:
    sort_field: Optional[RecordField] = None
    sort_direction: SortDirection = SortDirection.ASCENDING
    group_by_status: bool = False
    filters: Dict[RecordField, str] = field(default_factory=dict)


@dataclass(slots=True)
class TableView:
    rows: List[DeliveryRow]
    total: int
    distinct_values: Dict[RecordField, List[str]]
    query: TableQuery


@dataclass(slots=True)
class DockReport:
    rows: List[DeliveryRow]
    at_dock: int
    overdue: int
    threshold_days: int
    generated_at: datetime


def build_rows(
    records: Sequence[DeliveryRecord],
    now: Optional[datetime] = None,
    threshold_days: int = DEFAULT_OVERDUE_THRESHOLD_DAYS,
) -> List[DeliveryRow]:
    current = now or datetime.now(timezone.utc)
    rows: List[DeliveryRow] = []
    for record in records:
        at_dock = record.status is DeliveryStatus.AT_DOCK
        rows.append(
            DeliveryRow(
                record=record,
                days_at_dock=days_at_dock(record, current) if at_dock else None,
                overdue=is_overdue(record, current, threshold_days),
            )
        )
    return rows


def _select(records: Sequence[DeliveryRecord], query: TableQuery) -> List[DeliveryRecord]:
    selected = apply_filters(records, query.filters)
    if query.group_by_status:
        return sort_by_status(selected)
    if query.sort_field is not None:
        return sort_records(selected, query.sort_field, query.sort_direction)
    return selected


def build_table_view(
    records: Sequence[DeliveryRecord],
    query: Optional[TableQuery] = None,
    now: Optional[datetime] = None,
    threshold_days: int = DEFAULT_OVERDUE_THRESHOLD_DAYS,
) -> TableView:
    query = query or TableQuery()
    return TableView(
        rows=build_rows(_select(records, query), now, threshold_days),
        total=len(records),
        distinct_values=distinct_values(records),
        query=query,
    )


def build_dock_report(
    records: Sequence[DeliveryRecord],
    query: Optional[TableQuery] = None,
    now: Optional[datetime] = None,
    threshold_days: int = DEFAULT_OVERDUE_THRESHOLD_DAYS,
) -> DockReport:
    """Printable view: every at-dock row of the current table, overdue ones flagged."""
    query = query or TableQuery()
    current = now or datetime.now(timezone.utc)
    at_dock = [record for record in _select(records, query) if record.status is DeliveryStatus.AT_DOCK]
    rows = build_rows(at_dock, current, threshold_days)
    return DockReport(
        rows=rows,
        at_dock=len(rows),
        overdue=sum(1 for row in rows if row.overdue),
        threshold_days=threshold_days,
        generated_at=current,
    )


def apply_status_change(
    records: Sequence[DeliveryRecord],
    record_id: str,
    updated: DeliveryRecord | DeliveryStatus,
) -> List[DeliveryRecord]:
    """Reflect a store-confirmed status change in a local collection."""
    result: List[DeliveryRecord] = []
    for record in records:
        if record.id != record_id:
            result.append(record)
        elif isinstance(updated, DeliveryRecord):
            result.append(updated)
        else:
            result.append(replace(record, status=updated))
    return result


def remove_record(records: Sequence[DeliveryRecord], record_id: str) -> List[DeliveryRecord]:
    """Reflect a store-confirmed delete in a local collection."""
    return [record for record in records if record.id != record_id]


def parse_filters(selections: Mapping[str, Optional[str]]) -> Dict[RecordField, str]:
    return {RecordField.parse(name): value for name, value in selections.items() if value}
