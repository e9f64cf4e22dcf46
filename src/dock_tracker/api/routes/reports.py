"""Dock report endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status

from ...config import settings
from ...data.deliveries_repository import DeliveryStore, DeliveryStoreError
from ...schemas.deliveries import DockReportResponse
from ...services.deliveries import TableQuery, build_dock_report
from ...services.reports import dock_report_to_csv
from ..dependencies import get_store, raise_store_error, row_model, table_query

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/dock", response_model=DockReportResponse, status_code=status.HTTP_200_OK)
def get_dock_report(
    query: TableQuery = Depends(table_query),
    format: Literal["json", "csv"] = Query(default="json", description="Output format"),
    store: DeliveryStore = Depends(get_store),
):
    """Every at-dock delivery of the current table view, overdue ones flagged."""
    try:
        records = store.list()
    except DeliveryStoreError as exc:
        raise_store_error(exc)

    report = build_dock_report(records, query, threshold_days=settings.overdue_threshold_days)
    if format == "csv":
        stamp = report.generated_at.strftime("%Y%m%dT%H%M%SZ")
        return Response(
            content=dock_report_to_csv(report),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="dock_report_{stamp}.csv"'},
        )
    return DockReportResponse(
        items=[row_model(row) for row in report.rows],
        atDock=report.at_dock,
        overdue=report.overdue,
        overdueThresholdDays=report.threshold_days,
        generatedAt=report.generated_at,
    )
