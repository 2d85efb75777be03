from __future__ import annotations

from dataclasses import dataclass

from rbo.domain.order.entities import InvalidOrderStatusError, OrderStatus
from rbo.domain.table.entities import Table, TableStatus


@dataclass(frozen=True)
class TableTransition:
    """Effect of an order status on the table holding the order.

    ``target`` is ``None`` when the table keeps its current status.
    ``release`` clears the order link and frees the table.
    """

    target: TableStatus | None
    release: bool = False

    def apply(self, table: Table) -> Table:
        if self.release:
            return table.free()
        if self.target is None:
            return table
        return table.with_status(self.target)


UNCHANGED = TableTransition(target=None)

_TRANSITIONS: dict[OrderStatus, TableTransition] = {
    OrderStatus.PENDING: TableTransition(target=TableStatus.OCCUPIED),
    OrderStatus.CONFIRMED: UNCHANGED,
    OrderStatus.PREPARING: TableTransition(target=TableStatus.PREPARING),
    OrderStatus.READY: TableTransition(target=TableStatus.READY),
    OrderStatus.SERVED: TableTransition(target=TableStatus.OCCUPIED),
    OrderStatus.DELIVERED: TableTransition(target=TableStatus.OCCUPIED),
    OrderStatus.COMPLETED: TableTransition(target=TableStatus.AVAILABLE, release=True),
    OrderStatus.CANCELLED: TableTransition(target=TableStatus.AVAILABLE, release=True),
}


def map_order_status_to_table_status(order_status: OrderStatus | str) -> TableTransition:
    # Unknown statuses leave the table untouched rather than failing.
    if not isinstance(order_status, OrderStatus):
        try:
            order_status = OrderStatus.parse(order_status)
        except InvalidOrderStatusError:
            return UNCHANGED
    return _TRANSITIONS.get(order_status, UNCHANGED)
