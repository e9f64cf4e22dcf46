"""Domain models for delivery records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class DeliveryStatus(str, Enum):
    """Where a shipment currently is. Both transitions are user-triggered."""

    AT_DOCK = "AtDock"
    IN_TRANSIT = "InTransit"

    @classmethod
    def parse(cls, value: Any) -> "DeliveryStatus":
        """Resolve a status from its value or from the labels stored by the legacy table."""
        if isinstance(value, DeliveryStatus):
            return value
        normalized = str(value or "").strip().lower()
        status = _STATUS_ALIASES.get(normalized)
        if status is None:
            raise ValueError(f"Unknown delivery status '{value}'")
        return status


_STATUS_ALIASES = {
    "atdock": DeliveryStatus.AT_DOCK,
    "at_dock": DeliveryStatus.AT_DOCK,
    "doca": DeliveryStatus.AT_DOCK,
    "intransit": DeliveryStatus.IN_TRANSIT,
    "in_transit": DeliveryStatus.IN_TRANSIT,
    "rota de entrega": DeliveryStatus.IN_TRANSIT,
}


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    def flipped(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True)
class DeliveryRecord:
    """A shipment as stored in the record store."""

    id: str
    client: str
    invoice: str
    destination: str
    weight: float
    volume: float
    status: DeliveryStatus
    observation: str
    dock_arrival_time: str
    created_at: Optional[str] = None


@dataclass(slots=True)
class NewDelivery:
    """Insert payload; the store assigns ``id`` and ``created_at``."""

    client: str
    invoice: str
    destination: str
    weight: float
    volume: float
    status: DeliveryStatus = DeliveryStatus.AT_DOCK
    observation: str = ""
    dock_arrival_time: str = field(default_factory=utc_now_iso)


class RecordField(str, Enum):
    """Closed set of delivery attributes usable for sorting and filtering."""

    ID = "id"
    CLIENT = "client"
    INVOICE = "invoice"
    DESTINATION = "destination"
    WEIGHT = "weight"
    VOLUME = "volume"
    STATUS = "status"
    OBSERVATION = "observation"
    DOCK_ARRIVAL_TIME = "dock_arrival_time"
    CREATED_AT = "created_at"

    def value_of(self, record: DeliveryRecord) -> Any:
        return _ACCESSORS[self](record)

    @classmethod
    def parse(cls, name: "RecordField | str") -> "RecordField":
        if isinstance(name, RecordField):
            return name
        key = str(name).strip()
        key = _FIELD_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError as exc:
            raise ValueError(f"Unknown delivery field '{name}'") from exc


_ACCESSORS = {
    RecordField.ID: lambda record: record.id,
    RecordField.CLIENT: lambda record: record.client,
    RecordField.INVOICE: lambda record: record.invoice,
    RecordField.DESTINATION: lambda record: record.destination,
    RecordField.WEIGHT: lambda record: record.weight,
    RecordField.VOLUME: lambda record: record.volume,
    RecordField.STATUS: lambda record: record.status,
    RecordField.OBSERVATION: lambda record: record.observation,
    RecordField.DOCK_ARRIVAL_TIME: lambda record: record.dock_arrival_time,
    RecordField.CREATED_AT: lambda record: record.created_at,
}

_FIELD_ALIASES = {
    "dockArrivalTime": "dock_arrival_time",
    "docaDate": "dock_arrival_time",
    "doca_date": "dock_arrival_time",
    "createdAt": "created_at",
}

SORTABLE_FIELDS: frozenset[RecordField] = frozenset(RecordField) - {RecordField.ID, RecordField.CREATED_AT}

# Columns shown (and filterable) in the delivery table, in display order.
TABLE_COLUMNS: tuple[RecordField, ...] = (
    RecordField.CLIENT,
    RecordField.INVOICE,
    RecordField.DESTINATION,
    RecordField.WEIGHT,
    RecordField.VOLUME,
    RecordField.STATUS,
    RecordField.OBSERVATION,
)
