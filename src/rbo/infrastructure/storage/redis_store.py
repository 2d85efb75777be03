from __future__ import annotations

import json
from typing import Any

import redis

from rbo.application.ports.storage import DocumentStore, StorageUnavailableError
from rbo.infrastructure.cache.redis_client import get_redis_client

_UNAVAILABLE = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


class RedisDocumentStore(DocumentStore):
    def __init__(
        self,
        key_prefix: str = "rbo:",
        timeout_seconds: float = 1.0,
        client: redis.Redis | None = None,
    ) -> None:
        self._key_prefix = key_prefix
        self._timeout_seconds = timeout_seconds
        self._client = client

    def _redis(self) -> redis.Redis:
        if self._client is not None:
            return self._client
        try:
            return get_redis_client(timeout_seconds=self._timeout_seconds)
        except RuntimeError as exc:
            raise StorageUnavailableError(str(exc)) from exc

    def get(self, key: str) -> Any | None:
        try:
            value = self._redis().get(self._key_prefix + key)
        except _UNAVAILABLE as exc:
            raise StorageUnavailableError(f"redis read failed for {key}") from exc
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return json.loads(value)

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        try:
            self._redis().set(self._key_prefix + key, payload)
        except _UNAVAILABLE as exc:
            raise StorageUnavailableError(f"redis write failed for {key}") from exc

    def delete(self, key: str) -> None:
        try:
            self._redis().delete(self._key_prefix + key)
        except _UNAVAILABLE as exc:
            raise StorageUnavailableError(f"redis delete failed for {key}") from exc
