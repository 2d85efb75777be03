from __future__ import annotations

import json
from typing import Any

from rbo.application.ports.storage import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """Process-local document store.

    Values are kept as JSON text so callers never share mutable state with the
    store, the same as with the Redis-backed store.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._documents: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Any | None:
        raw = self._documents.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._documents[key] = json.dumps(value, ensure_ascii=False)

    def delete(self, key: str) -> None:
        self._documents.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._documents)
