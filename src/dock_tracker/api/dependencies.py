"""Shared request dependencies for delivery and report routes."""

from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException, Query, status

from ..data.deliveries_repository import (
    DeliveryNotFoundError,
    DeliveryStore,
    DeliveryStoreError,
    StoreNotConfiguredError,
    get_delivery_store,
)
from ..models.domain import SORTABLE_FIELDS, DeliveryRecord, RecordField, SortDirection
from ..schemas.deliveries import DeliveryModel, DeliveryRowModel
from ..services.deliveries import DeliveryRow, TableQuery, parse_filters


def get_store() -> DeliveryStore:
    try:
        return get_delivery_store()
    except StoreNotConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def raise_store_error(exc: DeliveryStoreError) -> NoReturn:
    if isinstance(exc, DeliveryNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, StoreNotConfiguredError):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


def table_query(
    sort: str | None = Query(default=None, description="Field to sort by"),
    direction: SortDirection = Query(default=SortDirection.ASCENDING, description="Sort direction (asc or desc)"),
    group_by_status: bool = Query(default=False, description="Place at-dock deliveries before in-transit ones"),
    client: str | None = Query(default=None, description="Filter by client"),
    invoice: str | None = Query(default=None, description="Filter by invoice"),
    destination: str | None = Query(default=None, description="Filter by destination"),
    weight: str | None = Query(default=None, description="Filter by weight"),
    volume: str | None = Query(default=None, description="Filter by volume"),
    delivery_status: str | None = Query(default=None, alias="status", description="Filter by status"),
    observation: str | None = Query(default=None, description="Filter by observation"),
) -> TableQuery:
    sort_field = None
    if sort:
        try:
            sort_field = RecordField.parse(sort)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        if sort_field not in SORTABLE_FIELDS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Field '{sort_field.value}' cannot be used for sorting",
            )
        if group_by_status:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Use either 'sort' or 'group_by_status', not both",
            )

    filters = parse_filters(
        {
            "client": client,
            "invoice": invoice,
            "destination": destination,
            "weight": weight,
            "volume": volume,
            "status": delivery_status,
            "observation": observation,
        }
    )
    return TableQuery(
        sort_field=sort_field,
        sort_direction=direction,
        group_by_status=group_by_status,
        filters=filters,
    )


def record_model(record: DeliveryRecord) -> DeliveryModel:
    return DeliveryModel(
        id=record.id,
        client=record.client,
        invoice=record.invoice,
        destination=record.destination,
        weight=record.weight,
        volume=record.volume,
        status=record.status,
        observation=record.observation,
        dockArrivalTime=record.dock_arrival_time,
        createdAt=record.created_at,
    )


def row_model(row: DeliveryRow) -> DeliveryRowModel:
    return DeliveryRowModel(
        **record_model(row.record).model_dump(),
        daysAtDock=row.days_at_dock,
        overdue=row.overdue,
    )
