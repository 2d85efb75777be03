from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from rbo.domain.common.ids import OrderId, TableId


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    PREPARING = "preparing"
    READY = "ready"


class FloorLocation(str, Enum):
    MAIN_FLOOR = "mainFloor"
    TOP_FLOOR = "topFloor"


class Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Marks an omitted order link: keep whatever the table currently references.
UNSET = Unset()


@dataclass(frozen=True)
class Table:
    table_id: TableId
    name: str
    capacity: int
    status: TableStatus
    order_id: OrderId | None
    location: FloorLocation
    section: str

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")
        if self.order_id is not None and self.status == TableStatus.AVAILABLE:
            raise ValueError("an available table cannot reference an order")

    @property
    def is_available(self) -> bool:
        return self.status == TableStatus.AVAILABLE

    def with_status(
        self,
        status: TableStatus,
        order_id: OrderId | None | Unset = UNSET,
    ) -> Table:
        # No transition table: any status may follow any other.
        if status == TableStatus.AVAILABLE:
            return replace(self, status=status, order_id=None)
        linked = self.order_id if isinstance(order_id, Unset) else order_id
        return replace(self, status=status, order_id=linked)

    def assign_order(self, order_id: OrderId) -> Table:
        return self.with_status(TableStatus.OCCUPIED, order_id)

    def free(self) -> Table:
        return self.with_status(TableStatus.AVAILABLE)

    def with_capacity(self, capacity: int) -> Table:
        return replace(self, capacity=capacity)
