from __future__ import annotations

import logging
from collections.abc import Callable

from rbo.application.dto.responses import FloorPlanResponse, TableListResponse, TableResponse
from rbo.application.mappers.table_mapper import to_floor_plan_response, to_table_response
from rbo.application.metrics.order_lifecycle import record_table_status_change
from rbo.application.ports.repositories import TableRepository
from rbo.domain.common.ids import OrderId, TableId
from rbo.domain.table.entities import UNSET, FloorLocation, Table, TableStatus, Unset

logger = logging.getLogger(__name__)


class InvalidTableStatusError(Exception):
    pass


class InvalidFloorError(Exception):
    pass


def parse_table_status(value: str) -> TableStatus:
    try:
        return TableStatus(value.strip().lower())
    except ValueError as exc:
        raise InvalidTableStatusError(f"invalid table status: {value}") from exc


def parse_floor(value: str) -> FloorLocation:
    normalized = value.strip().lower()
    for location in FloorLocation:
        if normalized in (location.value.lower(), location.value.lower().removesuffix("floor")):
            return location
    raise InvalidFloorError(f"invalid floor: {value}")


def _apply(
    table_repository: TableRepository,
    table_id: TableId,
    change: Callable[[Table], Table],
) -> bool:
    table = table_repository.get(table_id)
    if table is None:
        logger.info("table_not_found", extra={"table_id": str(table_id)})
        return False

    updated = change(table)
    saved = table_repository.save(updated)
    if saved:
        record_table_status_change(updated.status)
        logger.info(
            "table_updated",
            extra={
                "table_id": str(table_id),
                "from_status": table.status.value,
                "to_status": updated.status.value,
                "order_id": updated.order_id,
            },
        )
    return saved


class ListTables:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(
        self,
        *,
        floor: str | None = None,
        status: str | None = None,
    ) -> TableListResponse:
        location = parse_floor(floor) if floor else None
        table_status = parse_table_status(status) if status else None

        tables = [
            table
            for table in self._table_repository.list_all()
            if (location is None or table.location == location)
            and (table_status is None or table.status == table_status)
        ]
        return TableListResponse(tables=[to_table_response(table) for table in tables])


class GetFloorPlan:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self) -> FloorPlanResponse:
        return to_floor_plan_response(self._table_repository.list_all())


class GetTable:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, table_id: TableId) -> TableResponse | None:
        table = self._table_repository.get(table_id)
        return to_table_response(table) if table is not None else None


class GetTableByOrder:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, order_id: OrderId) -> TableResponse | None:
        table = self._table_repository.find_by_order(order_id)
        return to_table_response(table) if table is not None else None


class UpdateTableStatus:
    """Set a table's status; an omitted order id keeps the current link."""

    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(
        self,
        table_id: TableId,
        status: TableStatus | str,
        order_id: OrderId | None | Unset = UNSET,
    ) -> bool:
        target = status if isinstance(status, TableStatus) else parse_table_status(status)
        return _apply(
            self._table_repository,
            table_id,
            lambda table: table.with_status(target, order_id),
        )


class AssignOrderToTable:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, table_id: TableId, order_id: OrderId) -> bool:
        return _apply(
            self._table_repository,
            table_id,
            lambda table: table.assign_order(order_id),
        )


class FreeTable:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, table_id: TableId) -> bool:
        return _apply(self._table_repository, table_id, lambda table: table.free())


class UpdateTableCapacity:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, table_id: TableId, capacity: int) -> bool:
        return _apply(
            self._table_repository,
            table_id,
            lambda table: table.with_capacity(capacity),
        )


class ResetAllTables:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self) -> bool:
        table_count = self._table_repository.reset_all()
        logger.info("tables_reset", extra={"table_count": table_count})
        return True
