"""Per-column equality filters for the delivery table."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ...models.domain import DeliveryRecord, RecordField


def display_value(value: Any) -> str:
    """String form of a field value, shared by filter options and matching."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def distinct_values(records: Iterable[DeliveryRecord]) -> Dict[RecordField, List[str]]:
    """Distinct display values per field, sorted ascending."""
    values: Dict[RecordField, set[str]] = {field: set() for field in RecordField}
    for record in records:
        for field in RecordField:
            rendered = display_value(field.value_of(record))
            if rendered:
                values[field].add(rendered)
    return {field: sorted(options) for field, options in values.items()}


def _normalize_selections(selections: Mapping[RecordField | str, Optional[str]]) -> Dict[RecordField, str]:
    normalized: Dict[RecordField, str] = {}
    for key, selected in selections.items():
        if not selected:
            continue
        normalized[RecordField.parse(key)] = str(selected).lower()
    return normalized


def apply_filters(
    records: Sequence[DeliveryRecord],
    selections: Mapping[RecordField | str, Optional[str]],
) -> List[DeliveryRecord]:
    """Keep records whose display value equals every non-empty selection, ignoring case."""
    constraints = _normalize_selections(selections)
    if not constraints:
        return list(records)
    return [
        record
        for record in records
        if all(display_value(field.value_of(record)).lower() == selected for field, selected in constraints.items())
    ]
