"""Delivery API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.domain import DeliveryStatus


def _parse_status(value: Any) -> DeliveryStatus:
    try:
        return DeliveryStatus.parse(value)
    except ValueError as exc:
        raise ValueError(f"status must be one of {[status.value for status in DeliveryStatus]}") from exc


class DeliveryCreateRequest(BaseModel):
    client: str
    invoice: str
    destination: str
    weight: float = Field(..., ge=0, allow_inf_nan=False)
    volume: float = Field(..., ge=0, allow_inf_nan=False)
    status: DeliveryStatus = DeliveryStatus.AT_DOCK
    observation: str = ""
    dockArrivalTime: Optional[datetime] = None

    @field_validator("client", "invoice", "destination")
    @classmethod
    def _require_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be empty")
        return stripped

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> DeliveryStatus:
        return _parse_status(value)


class StatusUpdateRequest(BaseModel):
    status: DeliveryStatus

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> DeliveryStatus:
        return _parse_status(value)


class DeliveryModel(BaseModel):
    id: str
    client: str
    invoice: str
    destination: str
    weight: float
    volume: float
    status: DeliveryStatus
    observation: str
    dockArrivalTime: str
    createdAt: Optional[str] = None


class DeliveryRowModel(DeliveryModel):
    daysAtDock: Optional[int] = None
    overdue: bool = False


class DeliveryTableResponse(BaseModel):
    items: List[DeliveryRowModel]
    total: int
    filtered: int
    sort: Optional[str] = None
    direction: str
    groupByStatus: bool
    distinctValues: dict[str, List[str]]
    overdueThresholdDays: int
    lastUpdate: datetime


class DockReportResponse(BaseModel):
    items: List[DeliveryRowModel]
    atDock: int
    overdue: int
    overdueThresholdDays: int
    generatedAt: datetime


class LastUpdateResponse(BaseModel):
    lastUpdate: datetime
