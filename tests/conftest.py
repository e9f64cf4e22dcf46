from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient

from dock_tracker.api.dependencies import get_store
from dock_tracker.data.deliveries_repository import DeliveryNotFoundError, DeliveryStoreError
from dock_tracker.main import create_app
from dock_tracker.models.domain import DeliveryRecord, DeliveryStatus, NewDelivery


class FakeDeliveryStore:
    """In-memory record store; newest deliveries are listed first."""

    def __init__(self) -> None:
        self.records: list[DeliveryRecord] = []
        self.fail = False
        self.changed_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._ids = count(1)

    def _check(self) -> None:
        if self.fail:
            raise DeliveryStoreError("store unavailable")

    def list(self) -> list[DeliveryRecord]:
        self._check()
        return list(self.records)

    def insert(self, delivery: NewDelivery) -> DeliveryRecord:
        self._check()
        record = DeliveryRecord(
            id=str(next(self._ids)),
            client=delivery.client,
            invoice=delivery.invoice,
            destination=delivery.destination,
            weight=delivery.weight,
            volume=delivery.volume,
            status=delivery.status,
            observation=delivery.observation,
            dock_arrival_time=delivery.dock_arrival_time,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self.records.insert(0, record)
        self.changed_at = datetime.now(timezone.utc)
        return record

    def update_status(self, delivery_id: str, status: DeliveryStatus) -> DeliveryRecord:
        self._check()
        for index, record in enumerate(self.records):
            if record.id == delivery_id:
                self.records[index] = replace(record, status=status)
                return self.records[index]
        raise DeliveryNotFoundError(f"Delivery '{delivery_id}' not found")

    def delete(self, delivery_id: str) -> None:
        self._check()
        self.records = [record for record in self.records if record.id != delivery_id]
        self.changed_at = datetime.now(timezone.utc)

    def last_update(self) -> datetime:
        return self.changed_at


@pytest.fixture
def store() -> FakeDeliveryStore:
    return FakeDeliveryStore()


@pytest.fixture
def api_client(store: FakeDeliveryStore) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    return TestClient(app)
