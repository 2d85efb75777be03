from __future__ import annotations

from fastapi import APIRouter, Query

from rbo.api.providers import order_repository
from rbo.application.dto.responses import OrderListResponse, OrderStatsResponse, RevenueReportResponse
from rbo.application.use_cases.order_stats import GetOrderStats, GetRecentOrders, GetRevenueReport

router = APIRouter()


@router.get("/v1/analytics/stats", response_model=OrderStatsResponse)
def get_order_stats(
    month: str | None = Query(default=None),
    year: int | None = Query(default=None),
) -> OrderStatsResponse:
    return GetOrderStats(order_repository()).execute(month=month, year=year)


@router.get("/v1/analytics/revenue", response_model=RevenueReportResponse)
def get_revenue_report() -> RevenueReportResponse:
    return GetRevenueReport(order_repository()).execute()


@router.get("/v1/analytics/recent-orders", response_model=OrderListResponse)
def get_recent_orders(limit: int = Query(default=10)) -> OrderListResponse:
    return GetRecentOrders(order_repository()).execute(limit=limit)
