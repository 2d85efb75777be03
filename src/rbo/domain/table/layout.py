from __future__ import annotations

from rbo.domain.common.ids import TableId
from rbo.domain.table.entities import FloorLocation, Table, TableStatus

# (id, name, capacity, section)
_MAIN_FLOOR: tuple[tuple[str, str, int, str], ...] = (
    ("m1", "Table 1", 4, "Main Area"),
    ("m2", "Table 2", 2, "Main Area"),
    ("m3", "Table 3", 6, "Main Area"),
    ("m4", "Table 4", 4, "Window Area"),
    ("m5", "Table 5", 2, "Window Area"),
    ("m6", "Table 6", 8, "Private Area"),
    ("m7", "Table 7", 4, "Private Area"),
)

_TOP_FLOOR: tuple[tuple[str, str, int, str], ...] = (
    ("t1", "Table 8", 4, "Balcony View"),
    ("t2", "Table 9", 2, "Balcony View"),
    ("t3", "Table 10", 6, "Balcony View"),
    ("t4", "Table 11", 8, "Premium Section"),
    ("t5", "Table 12", 4, "Premium Section"),
    ("t6", "Table 13", 2, "VIP Area"),
    ("t7", "Table 14", 6, "VIP Area"),
    ("t8", "Table 15", 4, "VIP Area"),
)


def _build(rows: tuple[tuple[str, str, int, str], ...], location: FloorLocation) -> list[Table]:
    return [
        Table(
            table_id=TableId(table_id),
            name=name,
            capacity=capacity,
            status=TableStatus.AVAILABLE,
            order_id=None,
            location=location,
            section=section,
        )
        for table_id, name, capacity, section in rows
    ]


def seed_tables() -> list[Table]:
    """Initial floor plan: every table available, main floor first."""
    return _build(_MAIN_FLOOR, FloorLocation.MAIN_FLOOR) + _build(
        _TOP_FLOOR, FloorLocation.TOP_FLOOR
    )
