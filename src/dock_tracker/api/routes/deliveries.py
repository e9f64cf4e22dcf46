"""Delivery table endpoints."""

from __future__ import annotations

import logging
from datetime import timezone

from fastapi import APIRouter, Depends, Response, status

from ...config import settings
from ...data.deliveries_repository import DeliveryStore, DeliveryStoreError
from ...models.domain import NewDelivery, utc_now_iso
from ...schemas.deliveries import (
    DeliveryCreateRequest,
    DeliveryModel,
    DeliveryTableResponse,
    LastUpdateResponse,
    StatusUpdateRequest,
)
from ...services.deliveries import TableQuery, build_table_view
from ..dependencies import get_store, raise_store_error, record_model, row_model, table_query

router = APIRouter(prefix="/deliveries", tags=["deliveries"])


@router.get("", response_model=DeliveryTableResponse, status_code=status.HTTP_200_OK)
def list_deliveries(
    query: TableQuery = Depends(table_query),
    store: DeliveryStore = Depends(get_store),
) -> DeliveryTableResponse:
    try:
        records = store.list()
    except DeliveryStoreError as exc:
        raise_store_error(exc)

    view = build_table_view(records, query, threshold_days=settings.overdue_threshold_days)
    return DeliveryTableResponse(
        items=[row_model(row) for row in view.rows],
        total=view.total,
        filtered=len(view.rows),
        sort=query.sort_field.value if query.sort_field else None,
        direction=query.sort_direction.value,
        groupByStatus=query.group_by_status,
        distinctValues={field.value: options for field, options in view.distinct_values.items()},
        overdueThresholdDays=settings.overdue_threshold_days,
        lastUpdate=store.last_update(),
    )


@router.post("", response_model=DeliveryModel, status_code=status.HTTP_201_CREATED)
def create_delivery(
    payload: DeliveryCreateRequest,
    store: DeliveryStore = Depends(get_store),
) -> DeliveryModel:
    arrival = payload.dockArrivalTime
    if arrival is not None and arrival.tzinfo is None:
        arrival = arrival.replace(tzinfo=timezone.utc)
    delivery = NewDelivery(
        client=payload.client,
        invoice=payload.invoice,
        destination=payload.destination,
        weight=payload.weight,
        volume=payload.volume,
        status=payload.status,
        observation=payload.observation or "",
        dock_arrival_time=arrival.isoformat() if arrival else utc_now_iso(),
    )
    try:
        record = store.insert(delivery)
    except DeliveryStoreError as exc:
        raise_store_error(exc)
    logging.info(f"Delivery {record.id} added for invoice {record.invoice}")
    return record_model(record)


@router.patch("/{delivery_id}/status", response_model=DeliveryModel, status_code=status.HTTP_200_OK)
def update_delivery_status(
    delivery_id: str,
    payload: StatusUpdateRequest,
    store: DeliveryStore = Depends(get_store),
) -> DeliveryModel:
    try:
        record = store.update_status(delivery_id, payload.status)
    except DeliveryStoreError as exc:
        raise_store_error(exc)
    return record_model(record)


@router.delete("/{delivery_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_delivery(delivery_id: str, store: DeliveryStore = Depends(get_store)) -> Response:
    try:
        store.delete(delivery_id)
    except DeliveryStoreError as exc:
        raise_store_error(exc)
    logging.info(f"Delivery {delivery_id} deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/last-update", response_model=LastUpdateResponse, status_code=status.HTTP_200_OK)
def get_last_update(store: DeliveryStore = Depends(get_store)) -> LastUpdateResponse:
    return LastUpdateResponse(lastUpdate=store.last_update())
