from __future__ import annotations

from typing import Protocol

from rbo.domain.order.entities import Order
from rbo.domain.order.reservation import Reservation


class OrderNotifier(Protocol):
    """One-way, best-effort notification channel; implementations never raise."""

    def notify(self, order: Order) -> None: ...

    def notify_reservation(self, reservation: Reservation) -> None: ...
