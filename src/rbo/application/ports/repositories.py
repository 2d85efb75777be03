from __future__ import annotations

from typing import Protocol

from rbo.domain.common.ids import OrderId, TableId
from rbo.domain.order.entities import Order
from rbo.domain.table.entities import Table


class TableRepository(Protocol):
    def list_all(self) -> list[Table]: ...

    def get(self, table_id: TableId) -> Table | None: ...

    def find_by_order(self, order_id: OrderId) -> Table | None: ...

    def save(self, table: Table) -> bool: ...

    def save_all(self, tables: list[Table]) -> None: ...

    def reset_all(self) -> int: ...


class OrderRepository(Protocol):
    def list_all(self) -> list[Order]: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def add(self, order: Order) -> None: ...

    def update(self, order: Order) -> None: ...

    def delete(self, order_id: OrderId) -> bool: ...
