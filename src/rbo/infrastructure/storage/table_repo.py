from __future__ import annotations

import logging
from typing import Any

from rbo.application.ports.repositories import TableRepository
from rbo.application.ports.storage import DocumentStore, StorageUnavailableError
from rbo.domain.common.ids import OrderId, TableId
from rbo.domain.table.entities import FloorLocation, Table
from rbo.domain.table.layout import seed_tables
from rbo.infrastructure.storage.records import table_from_record, table_to_record

TABLES_KEY = "restaurantTables"

logger = logging.getLogger(__name__)


class DocumentTableRepository(TableRepository):
    """Floor plan kept as one document: ``{"mainFloor": [...], "topFloor": [...]}``.

    Every write replaces the whole document. The first read of an empty store
    writes the seed layout.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def list_all(self) -> list[Table]:
        try:
            return self._read_tables()
        except StorageUnavailableError:
            logger.warning("storage_unavailable", extra={"key": TABLES_KEY})
            return []

    def _read_tables(self) -> list[Table]:
        # Raises StorageUnavailableError; every read-modify-write goes through here.
        document = self._store.get(TABLES_KEY)
        if document is None:
            tables = seed_tables()
            self.save_all(tables)
            logger.info("tables_seeded", extra={"table_count": len(tables)})
            return tables
        return self._from_document(document)

    def get(self, table_id: TableId) -> Table | None:
        for table in self.list_all():
            if table.table_id == table_id:
                return table
        return None

    def find_by_order(self, order_id: OrderId) -> Table | None:
        for table in self.list_all():
            if table.order_id == order_id:
                return table
        return None

    def save(self, table: Table) -> bool:
        tables = self._read_tables()
        for index, existing in enumerate(tables):
            if existing.table_id == table.table_id:
                tables[index] = table
                self.save_all(tables)
                return True
        return False

    def save_all(self, tables: list[Table]) -> None:
        self._store.set(TABLES_KEY, self._to_document(tables))

    def reset_all(self) -> int:
        tables = [table.free() for table in self._read_tables()]
        self.save_all(tables)
        return len(tables)

    @staticmethod
    def _to_document(tables: list[Table]) -> dict[str, list[dict[str, Any]]]:
        document: dict[str, list[dict[str, Any]]] = {location.value: [] for location in FloorLocation}
        for table in tables:
            document[table.location.value].append(table_to_record(table))
        return document

    @staticmethod
    def _from_document(document: dict[str, Any]) -> list[Table]:
        tables: list[Table] = []
        for location in FloorLocation:
            for record in document.get(location.value, []):
                try:
                    tables.append(table_from_record(record, location))
                except (KeyError, TypeError, ValueError):
                    logger.warning(
                        "table_record_invalid",
                        extra={"table_id": record.get("id") if isinstance(record, dict) else None},
                    )
        return tables
