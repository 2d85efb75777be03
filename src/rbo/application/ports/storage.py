from __future__ import annotations

from typing import Any, Protocol


class DocumentStore(Protocol):
    """Key/value store of JSON documents."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class StorageUnavailableError(Exception):
    pass
