from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from dock_tracker.data import deliveries_repository
from dock_tracker.data.deliveries_repository import (
    DeliveryNotFoundError,
    DeliveryStoreError,
    StoreNotConfiguredError,
    SupabaseDeliveryStore,
    row_to_record,
)
from dock_tracker.models.domain import DeliveryStatus, NewDelivery


class DummyQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.operation = "select"
        self.payload = None
        self.filters = []
        self.ordering = None

    def select(self, columns="*", count=None):
        self.operation = "select"
        return self

    def insert(self, payload):
        self.operation, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.operation, self.payload = "update", payload
        return self

    def upsert(self, payload):
        self.operation, self.payload = "upsert", payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, size):
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        if self.table in self.client.failing_tables:
            raise RuntimeError(f"{self.table} unavailable")
        self.client.calls.append((self.table, self.operation, self.payload, list(self.filters)))
        rows = self.client.tables.setdefault(self.table, [])
        if self.operation == "insert":
            row = {**self.payload, "id": f"uuid-{len(rows) + 1}", "created_at": f"2024-03-0{len(rows) + 1}T00:00:00+00:00"}
            rows.append(row)
            return SimpleNamespace(data=[row], count=None)
        if self.operation == "update":
            matched = [row for row in rows if self._matches(row)]
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=matched, count=None)
        if self.operation == "delete":
            self.client.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=[], count=None)
        if self.operation == "upsert":
            kept = [row for row in rows if row.get("id") != self.payload["id"]]
            self.client.tables[self.table] = kept + [dict(self.payload)]
            return SimpleNamespace(data=[self.payload], count=None)
        selected = [dict(row) for row in rows if self._matches(row)]
        if self.ordering:
            column, desc = self.ordering
            selected.sort(key=lambda row: row.get(column) or "", reverse=desc)
        return SimpleNamespace(data=selected, count=len(selected))


class DummySupabase:
    def __init__(self, tables=None):
        self.tables = tables or {}
        self.failing_tables = set()
        self.calls = []

    def table(self, name):
        return DummyQuery(self, name)


def _new_delivery(invoice: str = "NF-1") -> NewDelivery:
    return NewDelivery(
        client="ACME",
        invoice=invoice,
        destination="Recife",
        weight=12.5,
        volume=3,
        dock_arrival_time="2024-03-01T10:00:00+00:00",
    )


def _store(client: DummySupabase) -> SupabaseDeliveryStore:
    return SupabaseDeliveryStore(client, table="deliveries", marker_table="ultima_atualizacao", marker_id=1)


def test_insert_writes_legacy_columns_and_touches_marker():
    client = DummySupabase()
    store = _store(client)

    record = store.insert(_new_delivery())

    stored = client.tables["deliveries"][0]
    assert stored["doca_date"] == "2024-03-01T10:00:00+00:00"
    assert stored["status"] == "Doca"
    assert record.id == "uuid-1"
    assert record.status is DeliveryStatus.AT_DOCK
    assert record.dock_arrival_time == "2024-03-01T10:00:00+00:00"
    marker = client.tables["ultima_atualizacao"][0]
    assert marker["id"] == 1
    assert marker["operacao"] == "insert"


def test_list_orders_newest_first_and_skips_invalid_rows():
    client = DummySupabase()
    store = _store(client)
    store.insert(_new_delivery("NF-1"))
    store.insert(_new_delivery("NF-2"))
    client.tables["deliveries"].append({"id": "bad", "status": "Lost", "created_at": "2024-03-09T00:00:00+00:00"})

    records = store.list()

    assert [record.invoice for record in records] == ["NF-2", "NF-1"]
    assert ("deliveries", "select", None, []) in client.calls


def test_update_status_keeps_dock_arrival_time_and_skips_marker():
    client = DummySupabase()
    store = _store(client)
    created = store.insert(_new_delivery())
    client.tables.pop("ultima_atualizacao")

    updated = store.update_status(created.id, DeliveryStatus.IN_TRANSIT)
    back = store.update_status(created.id, DeliveryStatus.AT_DOCK)

    assert updated.status is DeliveryStatus.IN_TRANSIT
    assert client.tables["deliveries"][0]["status"] == "Doca"
    assert back.dock_arrival_time == created.dock_arrival_time
    assert "ultima_atualizacao" not in client.tables


def test_update_status_of_missing_delivery_raises_not_found():
    store = _store(DummySupabase())

    with pytest.raises(DeliveryNotFoundError):
        store.update_status("missing", DeliveryStatus.IN_TRANSIT)


def test_delete_removes_row_and_records_operation():
    client = DummySupabase()
    store = _store(client)
    created = store.insert(_new_delivery())

    store.delete(created.id)

    assert client.tables["deliveries"] == []
    assert client.tables["ultima_atualizacao"][0]["operacao"] == "delete"


def test_store_failures_are_wrapped():
    client = DummySupabase()
    client.failing_tables.add("deliveries")
    store = _store(client)

    with pytest.raises(DeliveryStoreError):
        store.list()
    with pytest.raises(DeliveryStoreError):
        store.insert(_new_delivery())
    with pytest.raises(DeliveryStoreError):
        store.delete("uuid-1")


def test_marker_failure_does_not_fail_the_operation():
    client = DummySupabase()
    client.failing_tables.add("ultima_atualizacao")
    store = _store(client)

    record = store.insert(_new_delivery())

    assert record.invoice == "NF-1"
    assert isinstance(store.last_update(), datetime)


def test_last_update_reads_marker_timestamp():
    client = DummySupabase({"ultima_atualizacao": [{"id": 1, "timestamp": 1709287200000, "operacao": "insert"}]})

    assert _store(client).last_update() == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)


def test_row_to_record_accepts_current_column_names():
    record = row_to_record(
        {
            "id": 7,
            "client": "ACME",
            "invoice": "NF-7",
            "destination": "Natal",
            "weight": "30",
            "volume": None,
            "status": "InTransit",
            "observation": None,
            "dock_arrival_time": "2024-03-01T00:00:00Z",
        }
    )

    assert record.id == "7"
    assert record.weight == 30.0
    assert record.volume == 0.0
    assert record.status is DeliveryStatus.IN_TRANSIT
    assert record.observation == ""
    assert record.dock_arrival_time == "2024-03-01T00:00:00Z"


def test_get_delivery_store_requires_configuration(monkeypatch):
    monkeypatch.setattr(deliveries_repository, "get_supabase_client", lambda: None)

    with pytest.raises(StoreNotConfiguredError):
        deliveries_repository.get_delivery_store()


def test_unusable_stored_row_raises_store_error_after_marker(monkeypatch):
    monkeypatch.setattr(
        deliveries_repository,
        "STORED_STATUS_LABELS",
        {DeliveryStatus.AT_DOCK: "Lost", DeliveryStatus.IN_TRANSIT: "Lost"},
    )
    client = DummySupabase()
    store = _store(client)

    with pytest.raises(DeliveryStoreError):
        store.insert(_new_delivery())
    with pytest.raises(DeliveryStoreError):
        store.update_status("uuid-1", DeliveryStatus.IN_TRANSIT)

    assert client.tables["deliveries"][0]["invoice"] == "NF-1"
    assert client.tables["ultima_atualizacao"][0]["operacao"] == "insert"
