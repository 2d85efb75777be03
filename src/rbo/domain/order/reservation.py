from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from rbo.domain.common.ids import ReservationId, TableId


class PreferredTime(str, Enum):
    LUNCH = "lunch"
    DINNER = "dinner"

    @property
    def slot(self) -> str:
        if self == PreferredTime.LUNCH:
            return "Lunch (12:00 PM - 3:00 PM)"
        return "Dinner (7:00 PM - 10:00 PM)"


@dataclass(frozen=True)
class Reservation:
    reservation_id: ReservationId
    table_id: TableId
    name: str
    phone: str
    guests: int
    date: date
    preferred_time: PreferredTime

    def __post_init__(self) -> None:
        if self.guests < 1:
            raise ValueError("guests must be >= 1")
