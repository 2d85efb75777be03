from __future__ import annotations

from typing import NewType

TableId = NewType("TableId", str)
OrderId = NewType("OrderId", str)
ItemId = NewType("ItemId", str)
ReservationId = NewType("ReservationId", str)
