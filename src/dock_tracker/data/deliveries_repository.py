"""Record store for deliveries backed by a hosted Supabase table."""

from __future__ import annotations

import logging
import math
import time
from datetime import datetime, timezone
from typing import Any, Protocol

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import DeliveryRecord, DeliveryStatus, NewDelivery

# Column and status labels used by the existing hosted table.
DOCK_DATE_COLUMN = "doca_date"
STORED_STATUS_LABELS = {
    DeliveryStatus.AT_DOCK: "Doca",
    DeliveryStatus.IN_TRANSIT: "Rota de Entrega",
}


class DeliveryStoreError(RuntimeError):
    """Raised when the record store rejects or fails an operation."""


class StoreNotConfiguredError(DeliveryStoreError):
    """Raised when no record store credentials are configured."""


class DeliveryNotFoundError(DeliveryStoreError):
    """Raised when an update targets a delivery id the store does not have."""


class DeliveryStore(Protocol):
    def list(self) -> list[DeliveryRecord]: ...

    def insert(self, delivery: NewDelivery) -> DeliveryRecord: ...

    def update_status(self, delivery_id: str, status: DeliveryStatus) -> DeliveryRecord: ...

    def delete(self, delivery_id: str) -> None: ...

    def last_update(self) -> datetime: ...


def _coerce_number(value: Any) -> float:
    number = float(value if value not in (None, "") else 0)
    if not math.isfinite(number):
        raise ValueError(f"Non-finite quantity '{value}'")
    return number


def row_to_record(row: dict[str, Any]) -> DeliveryRecord:
    """Map a stored row onto a :class:`DeliveryRecord`.

    Raises ``KeyError``/``ValueError``/``TypeError`` when the row is unusable.
    """
    dock_arrival = row.get(DOCK_DATE_COLUMN) or row.get("dock_arrival_time") or ""
    return DeliveryRecord(
        id=str(row["id"]),
        client=str(row.get("client") or ""),
        invoice=str(row.get("invoice") or ""),
        destination=str(row.get("destination") or ""),
        weight=_coerce_number(row.get("weight")),
        volume=_coerce_number(row.get("volume")),
        status=DeliveryStatus.parse(row.get("status")),
        observation=str(row.get("observation") or ""),
        dock_arrival_time=str(dock_arrival),
        created_at=row.get("created_at"),
    )


def record_to_row(delivery: NewDelivery) -> dict[str, Any]:
    return {
        "client": delivery.client,
        "invoice": delivery.invoice,
        "destination": delivery.destination,
        "weight": float(delivery.weight),
        "volume": float(delivery.volume),
        "status": STORED_STATUS_LABELS[delivery.status],
        "observation": delivery.observation or "",
        DOCK_DATE_COLUMN: delivery.dock_arrival_time,
    }


class SupabaseDeliveryStore:
    """Delivery CRUD over a Supabase table plus the best-effort change marker."""

    def __init__(
        self,
        client: Any,
        table: str | None = None,
        marker_table: str | None = None,
        marker_id: int | None = None,
    ) -> None:
        self.client = client
        self.table = table or settings.deliveries_table
        self.marker_table = marker_table or settings.last_update_table
        self.marker_id = settings.last_update_row_id if marker_id is None else marker_id

    def list(self) -> list[DeliveryRecord]:
        try:
            response = self.client.table(self.table).select("*").order("created_at", desc=True).execute()
        except Exception as exc:
            logging.error(f"Failed to load deliveries: {exc}")
            raise DeliveryStoreError("Failed to load deliveries from the record store") from exc

        records: list[DeliveryRecord] = []
        for row in response.data or []:
            try:
                records.append(row_to_record(row))
            except (KeyError, ValueError, TypeError) as e:
                logging.warning(f"Skipping invalid delivery row {row.get('id')!r}: {e}")
                continue
        return records

    def insert(self, delivery: NewDelivery) -> DeliveryRecord:
        try:
            response = self.client.table(self.table).insert(record_to_row(delivery)).execute()
        except Exception as exc:
            logging.error(f"Failed to add delivery for invoice {delivery.invoice}: {exc}")
            raise DeliveryStoreError("Failed to add delivery to the record store") from exc
        if not response.data:
            raise DeliveryStoreError("Record store did not return the inserted delivery")

        self._touch_marker("insert")
        return self._map_stored_row(response.data[0])

    def update_status(self, delivery_id: str, status: DeliveryStatus) -> DeliveryRecord:
        # Dock arrival time is left untouched, even when moving back to the dock.
        try:
            response = (
                self.client.table(self.table)
                .update({"status": STORED_STATUS_LABELS[status]})
                .eq("id", delivery_id)
                .execute()
            )
        except Exception as exc:
            logging.error(f"Failed to update status of delivery {delivery_id}: {exc}")
            raise DeliveryStoreError("Failed to update delivery status") from exc
        if not response.data:
            raise DeliveryNotFoundError(f"Delivery '{delivery_id}' not found")
        return self._map_stored_row(response.data[0])

    def delete(self, delivery_id: str) -> None:
        try:
            self.client.table(self.table).delete().eq("id", delivery_id).execute()
        except Exception as exc:
            logging.error(f"Failed to delete delivery {delivery_id}: {exc}")
            raise DeliveryStoreError("Failed to delete delivery") from exc
        self._touch_marker("delete")

    def last_update(self) -> datetime:
        """Time of the last insert/delete seen by the marker, or now when unknown."""
        try:
            response = (
                self.client.table(self.marker_table)
                .select("timestamp")
                .eq("id", self.marker_id)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            if rows and rows[0].get("timestamp") is not None:
                return datetime.fromtimestamp(float(rows[0]["timestamp"]) / 1000, tz=timezone.utc)
        except Exception as e:
            logging.warning(f"Failed to read last update marker: {e}")
        return datetime.now(timezone.utc)

    def _map_stored_row(self, row: dict[str, Any]) -> DeliveryRecord:
        try:
            return row_to_record(row)
        except (KeyError, ValueError, TypeError) as exc:
            logging.error(f"Record store returned an unusable delivery row {row.get('id')!r}: {exc}")
            raise DeliveryStoreError("Record store returned an unusable delivery row") from exc

    def _touch_marker(self, operation: str) -> None:
        payload = {
            "id": self.marker_id,
            "timestamp": int(time.time() * 1000),
            "operacao": operation,
        }
        try:
            self.client.table(self.marker_table).upsert(payload).execute()
        except Exception as e:
            logging.warning(f"Failed to update last update marker after {operation}: {e}")


def get_delivery_store() -> DeliveryStore:
    """Build the configured record store, raising when Supabase is not set up."""
    client = get_supabase_client()
    if client is None:
        raise StoreNotConfiguredError(
            "Supabase not configured. Set DOCK_SUPABASE_URL and DOCK_SUPABASE_KEY environment variables."
        )
    return SupabaseDeliveryStore(client)
