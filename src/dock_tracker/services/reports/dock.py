"""Serialize the dock report into CSV for printing or download."""

from __future__ import annotations

import csv
import io

from ..deliveries.board import DockReport
from ..deliveries.filtering import display_value

CSV_COLUMNS = [
    "client",
    "invoice",
    "destination",
    "weight",
    "volume",
    "status",
    "observation",
    "dock_arrival_time",
    "days_at_dock",
    "overdue",
]


def dock_report_to_csv(report: DockReport) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for row in report.rows:
        record = row.record
        writer.writerow(
            {
                "client": record.client,
                "invoice": record.invoice,
                "destination": record.destination,
                "weight": display_value(record.weight),
                "volume": display_value(record.volume),
                "status": display_value(record.status),
                "observation": record.observation,
                "dock_arrival_time": record.dock_arrival_time,
                "days_at_dock": "" if row.days_at_dock is None else row.days_at_dock,
                "overdue": "yes" if row.overdue else "no",
            }
        )
    return buffer.getvalue()
