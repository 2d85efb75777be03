from __future__ import annotations

import sys
from pathlib import Path

import pytest
import redis

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rbo.application.ports.storage import StorageUnavailableError
from rbo.infrastructure.storage.redis_store import RedisDocumentStore
from rbo.infrastructure.storage.table_repo import DocumentTableRepository


class FakeRedis:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


class DownRedis:
    def get(self, key: str) -> str | None:
        raise redis.exceptions.ConnectionError("connection refused")

    def set(self, key: str, value: str) -> None:
        raise redis.exceptions.TimeoutError("timed out")

    def delete(self, key: str) -> None:
        raise redis.exceptions.ConnectionError("connection refused")


def test_values_are_stored_as_prefixed_json() -> None:
    client = FakeRedis()
    store = RedisDocumentStore(client=client)

    store.set("adminNotifications", [{"message": "New order #ORD-1 received"}])

    assert client.values == {"rbo:adminNotifications": '[{"message":"New order #ORD-1 received"}]'}
    assert store.get("adminNotifications") == [{"message": "New order #ORD-1 received"}]
    assert store.get("missing") is None

    store.delete("adminNotifications")
    assert client.values == {}


def test_connection_errors_become_storage_unavailable() -> None:
    store = RedisDocumentStore(client=DownRedis())

    with pytest.raises(StorageUnavailableError):
        store.get("restaurantTables")
    with pytest.raises(StorageUnavailableError):
        store.set("restaurantTables", {})


def test_missing_redis_url_is_storage_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REDIS_URL", raising=False)

    with pytest.raises(StorageUnavailableError):
        RedisDocumentStore().get("restaurantTables")


def test_table_registry_over_unreachable_redis_reads_empty() -> None:
    repository = DocumentTableRepository(RedisDocumentStore(client=DownRedis()))

    assert repository.list_all() == []
