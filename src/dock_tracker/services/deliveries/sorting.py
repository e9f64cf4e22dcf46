"""Type-aware, stable sorting of delivery records."""

from __future__ import annotations

import functools
import math
import unicodedata
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from ...models.domain import (
    SORTABLE_FIELDS,
    DeliveryRecord,
    DeliveryStatus,
    RecordField,
    SortDirection,
)


def _collation_key(text: str) -> Tuple[str, str]:
    # Accents and case only break ties, so "árvore" sorts next to "arvore".
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base.casefold(), text


def _to_number(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _as_comparable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def compare_values(left: Any, right: Any) -> int:
    """Compare two field values: collated text when both are text, numbers otherwise.

    Values that are not numbers compare equal to everything.
    """
    left = _as_comparable(left)
    right = _as_comparable(right)
    if isinstance(left, str) and isinstance(right, str):
        left_key, right_key = _collation_key(left), _collation_key(right)
        return (left_key > right_key) - (left_key < right_key)

    left_number, right_number = _to_number(left), _to_number(right)
    if math.isnan(left_number) or math.isnan(right_number):
        return 0
    return (left_number > right_number) - (left_number < right_number)


def sort_records(
    records: Iterable[DeliveryRecord],
    field: RecordField | str,
    direction: SortDirection | str = SortDirection.ASCENDING,
) -> List[DeliveryRecord]:
    """Return a new list ordered by ``field``; ties keep their prior order."""
    selector = RecordField.parse(field)
    if selector not in SORTABLE_FIELDS:
        raise ValueError(f"Field '{selector.value}' cannot be used for sorting")
    order = SortDirection(direction)

    def _compare(left: DeliveryRecord, right: DeliveryRecord) -> int:
        result = compare_values(selector.value_of(left), selector.value_of(right))
        return result if order is SortDirection.ASCENDING else -result

    return sorted(records, key=functools.cmp_to_key(_compare))


def sort_by_status(records: Iterable[DeliveryRecord]) -> List[DeliveryRecord]:
    """Group at-dock deliveries before in-transit ones, keeping the order within each group."""
    return sorted(records, key=lambda record: record.status is not DeliveryStatus.AT_DOCK)


def next_sort_state(
    current_field: Optional[RecordField],
    current_direction: SortDirection,
    requested_field: RecordField | str,
) -> Tuple[RecordField, SortDirection]:
    """Clicking the active column flips the direction; a new column starts ascending."""
    requested = RecordField.parse(requested_field)
    if requested == current_field:
        return requested, current_direction.flipped()
    return requested, SortDirection.ASCENDING
