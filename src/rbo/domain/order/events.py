from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rbo.domain.common.ids import OrderId, TableId
from rbo.domain.order.entities import OrderStatus
from rbo.domain.table.entities import TableStatus


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    from_status: OrderStatus
    to_status: OrderStatus
    occurred_at: datetime


@dataclass(frozen=True)
class TableReconciled:
    table_id: TableId
    order_id: OrderId
    from_status: TableStatus
    to_status: TableStatus
    occurred_at: datetime
