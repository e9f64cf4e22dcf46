"""Derived dock metrics: days at dock and the overdue flag."""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

from ...models.domain import DeliveryRecord, DeliveryStatus

DEFAULT_OVERDUE_THRESHOLD_DAYS = 5

_SECONDS_PER_DAY = 24 * 60 * 60

# Postgres trims trailing zeros from fractional seconds; fromisoformat wants 3 or 6 digits.
_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning ``None`` when it is not one.

    Naive values are read as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda match: f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}", text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_at_dock(record: DeliveryRecord, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since the record arrived at the dock.

    Floored, never negative, and 0 when the arrival time is malformed. Only
    meaningful while the record is at dock.
    """
    start = parse_timestamp(record.dock_arrival_time)
    if start is None:
        return 0
    current = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
    if current is None:
        return 0
    elapsed = (current - start).total_seconds()
    return max(0, math.floor(elapsed / _SECONDS_PER_DAY))


def is_overdue(
    record: DeliveryRecord,
    now: Optional[datetime] = None,
    threshold_days: int = DEFAULT_OVERDUE_THRESHOLD_DAYS,
) -> bool:
    if record.status is not DeliveryStatus.AT_DOCK:
        return False
    return days_at_dock(record, now) >= threshold_days
