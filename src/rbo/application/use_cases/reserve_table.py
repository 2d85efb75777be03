from __future__ import annotations

import logging
from datetime import date
from uuid import uuid4

from rbo.application.dto.requests import ReserveTableRequest
from rbo.application.ports.notifier import OrderNotifier
from rbo.application.ports.repositories import TableRepository
from rbo.application.use_cases.table_registry import UpdateTableStatus
from rbo.domain.common.ids import ReservationId, TableId
from rbo.domain.order.reservation import PreferredTime, Reservation
from rbo.domain.table.entities import TableStatus

logger = logging.getLogger(__name__)


class InvalidReservationError(Exception):
    pass


class ReserveTable:
    def __init__(self, table_repository: TableRepository, notifier: OrderNotifier) -> None:
        self._table_repository = table_repository
        self._notifier = notifier

    def execute(self, table_id: TableId, request_dto: ReserveTableRequest) -> bool:
        reservation = self._to_reservation(table_id, request_dto)
        if not UpdateTableStatus(self._table_repository).execute(table_id, TableStatus.RESERVED):
            return False

        logger.info(
            "table_reserved",
            extra={
                "table_id": str(table_id),
                "reservation_id": str(reservation.reservation_id),
                "guests": reservation.guests,
            },
        )
        self._notifier.notify_reservation(reservation)
        return True

    def _to_reservation(self, table_id: TableId, request_dto: ReserveTableRequest) -> Reservation:
        try:
            preferred_time = PreferredTime(request_dto.preferred_time.strip().lower())
        except ValueError as exc:
            raise InvalidReservationError(
                f"invalid preferred time: {request_dto.preferred_time}"
            ) from exc
        reservation_date: date = request_dto.reservation_date
        return Reservation(
            reservation_id=ReservationId(f"RES-{uuid4().hex[:8].upper()}"),
            table_id=table_id,
            name=request_dto.name,
            phone=request_dto.phone,
            guests=request_dto.guests,
            date=reservation_date,
            preferred_time=preferred_time,
        )
