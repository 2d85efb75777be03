from __future__ import annotations

from rbo.application.dto.responses import (
    CategoryRevenueResponse,
    ItemRevenueResponse,
    ItemTallyResponse,
    OrderStatsResponse,
    RevenueBucketResponse,
    RevenueReportResponse,
)
from rbo.domain.analytics.aggregates import OrderStats, RevenueBucket, RevenueReport


def to_order_stats_response(stats: OrderStats) -> OrderStatsResponse:
    return OrderStatsResponse(
        totalOrders=stats.total_orders,
        totalRevenue=stats.total_revenue,
        averageOrderValue=stats.average_order_value,
        cancelRate=stats.cancel_rate,
        currency=stats.currency,
        topSellingItems=[
            ItemTallyResponse(
                id=str(tally.item_id),
                name=tally.name,
                category=tally.category,
                quantity=tally.quantity,
                revenue=tally.revenue,
            )
            for tally in stats.top_selling_items
        ],
        revenueByCategory=[
            CategoryRevenueResponse(category=entry.category, revenue=entry.revenue)
            for entry in stats.revenue_by_category
        ],
    )


def _bucket(bucket: RevenueBucket) -> RevenueBucketResponse:
    return RevenueBucketResponse(totalRevenue=bucket.total_revenue, orderCount=bucket.order_count)


def to_revenue_report_response(report: RevenueReport) -> RevenueReportResponse:
    return RevenueReportResponse(
        currency=report.currency,
        dailyData={key: _bucket(bucket) for key, bucket in report.daily.items()},
        monthlyData={key: _bucket(bucket) for key, bucket in report.monthly.items()},
        topItems=[
            ItemRevenueResponse(
                id=str(tally.item_id),
                name=tally.name,
                category=tally.category,
                totalQuantity=tally.quantity,
                totalRevenue=tally.revenue,
            )
            for tally in report.top_items
        ],
    )
