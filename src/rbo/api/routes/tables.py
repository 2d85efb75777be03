from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from rbo.api.middleware.request_id import get_request_id
from rbo.api.providers import event_publisher, order_notifier, table_repository
from rbo.application.dto.requests import (
    AssignOrderRequest,
    ReconcileTableRequest,
    ReserveTableRequest,
    UpdateTableCapacityRequest,
    UpdateTableStatusRequest,
)
from rbo.application.dto.responses import (
    FloorPlanResponse,
    TableListResponse,
    TableResponse,
    TableUpdateResponse,
)
from rbo.application.use_cases.context import TraceContext
from rbo.application.use_cases.reconcile_table import ReconcileTableForOrder
from rbo.application.use_cases.reserve_table import ReserveTable
from rbo.application.use_cases.table_registry import (
    AssignOrderToTable,
    FreeTable,
    GetFloorPlan,
    GetTable,
    GetTableByOrder,
    ListTables,
    ResetAllTables,
    UpdateTableCapacity,
    UpdateTableStatus,
)
from rbo.domain.common.ids import OrderId, TableId
from rbo.domain.table.entities import UNSET
from rbo.infrastructure.observability.otel import current_trace_id

router = APIRouter()


def _updated_or_404(updated: bool, table_id: str) -> TableUpdateResponse:
    if not updated:
        raise HTTPException(status_code=404, detail=f"table {table_id} not found")
    return TableUpdateResponse(updated=True)


@router.get("/v1/tables", response_model=TableListResponse)
def list_tables(
    floor: str | None = Query(default=None),
    status: str | None = Query(default=None),
) -> TableListResponse:
    return ListTables(table_repository()).execute(floor=floor, status=status)


@router.get("/v1/tables/floor-plan", response_model=FloorPlanResponse)
def get_floor_plan() -> FloorPlanResponse:
    return GetFloorPlan(table_repository()).execute()


@router.get("/v1/tables/by-order/{order_id}", response_model=TableResponse)
def get_table_by_order(order_id: str) -> TableResponse:
    table = GetTableByOrder(table_repository()).execute(OrderId(order_id))
    if table is None:
        raise HTTPException(status_code=404, detail=f"no table holds order {order_id}")
    return table


@router.post("/v1/tables/reset", response_model=TableUpdateResponse)
def reset_tables() -> TableUpdateResponse:
    return TableUpdateResponse(updated=ResetAllTables(table_repository()).execute())


@router.post("/v1/tables/reconcile", response_model=TableUpdateResponse)
def reconcile_table(request_dto: ReconcileTableRequest) -> TableUpdateResponse:
    use_case = ReconcileTableForOrder(table_repository(), event_publisher())
    updated = use_case.execute(
        OrderId(request_dto.order_id),
        request_dto.order_status,
        TraceContext(trace_id=current_trace_id(), request_id=get_request_id()),
    )
    return TableUpdateResponse(updated=updated)


@router.get("/v1/tables/{table_id}", response_model=TableResponse)
def get_table(table_id: str) -> TableResponse:
    table = GetTable(table_repository()).execute(TableId(table_id))
    if table is None:
        raise HTTPException(status_code=404, detail=f"table {table_id} not found")
    return table


@router.put("/v1/tables/{table_id}/status", response_model=TableUpdateResponse)
def update_table_status(table_id: str, request_dto: UpdateTableStatusRequest) -> TableUpdateResponse:
    order_id = UNSET
    if "order_id" in request_dto.model_fields_set:
        order_id = OrderId(request_dto.order_id) if request_dto.order_id else None
    updated = UpdateTableStatus(table_repository()).execute(
        TableId(table_id),
        request_dto.status,
        order_id,
    )
    return _updated_or_404(updated, table_id)


@router.post("/v1/tables/{table_id}/assign", response_model=TableUpdateResponse)
def assign_order(table_id: str, request_dto: AssignOrderRequest) -> TableUpdateResponse:
    updated = AssignOrderToTable(table_repository()).execute(
        TableId(table_id),
        OrderId(request_dto.order_id),
    )
    return _updated_or_404(updated, table_id)


@router.post("/v1/tables/{table_id}/free", response_model=TableUpdateResponse)
def free_table(table_id: str) -> TableUpdateResponse:
    return _updated_or_404(FreeTable(table_repository()).execute(TableId(table_id)), table_id)


@router.put("/v1/tables/{table_id}/capacity", response_model=TableUpdateResponse)
def update_table_capacity(
    table_id: str,
    request_dto: UpdateTableCapacityRequest,
) -> TableUpdateResponse:
    updated = UpdateTableCapacity(table_repository()).execute(
        TableId(table_id),
        request_dto.capacity,
    )
    return _updated_or_404(updated, table_id)


@router.post("/v1/tables/{table_id}/reserve", response_model=TableUpdateResponse)
def reserve_table(table_id: str, request_dto: ReserveTableRequest) -> TableUpdateResponse:
    updated = ReserveTable(table_repository(), order_notifier()).execute(
        TableId(table_id),
        request_dto,
    )
    return _updated_or_404(updated, table_id)
