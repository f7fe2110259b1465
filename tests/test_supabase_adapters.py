"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field

import pytest

from kcalcal.adapters.supabase_preferences_repository import (
    SupabasePreferencesRepository,
)
from kcalcal.adapters.supabase_record_repository import SupabaseRecordRepository


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def upsert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        self.actions.append(action)
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_supabase_record_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_records")
    document = {"timestamp": 1, "foodName": "Rice", "calories": 300}
    table.queue("insert", [{"id": 5, "data": document}])
    table.queue("select", [{"id": 5, "data": document}, {"id": 6, "data": None}])

    repository = SupabaseRecordRepository(client)
    record_id = repository.insert(document)
    documents = repository.list_documents()

    assert record_id == 5
    assert table.last_payload == {"data": document}
    assert documents == [(5, document), (6, {})]


def test_supabase_record_repository_insert_failure() -> None:
    repository = SupabaseRecordRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.insert({"timestamp": 1})


def test_supabase_record_repository_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_records")

    SupabaseRecordRepository(client).delete(9)

    assert table.actions == ["delete"]
    assert table.last_filters == [("id", 9)]


def test_supabase_preferences_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("preferences")
    table.queue("select", [{"value": "1800"}])

    repository = SupabasePreferencesRepository(client)
    assert repository.get("goal_calories") == "1800"
    assert repository.get("model") is None

    repository.set("model", "gemini-2.0-flash")
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["key"] == "model"
    assert table.last_payload["value"] == "gemini-2.0-flash"
