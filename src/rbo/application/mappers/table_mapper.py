from __future__ import annotations

from rbo.application.dto.responses import FloorPlanResponse, TableResponse
from rbo.domain.table.entities import FloorLocation, Table


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        name=table.name,
        capacity=table.capacity,
        status=table.status.value,
        orderId=str(table.order_id) if table.order_id is not None else None,
        location=table.location.value,
        section=table.section,
    )


def to_floor_plan_response(tables: list[Table]) -> FloorPlanResponse:
    return FloorPlanResponse(
        mainFloor=[
            to_table_response(table)
            for table in tables
            if table.location == FloorLocation.MAIN_FLOOR
        ],
        topFloor=[
            to_table_response(table)
            for table in tables
            if table.location == FloorLocation.TOP_FLOOR
        ],
    )
