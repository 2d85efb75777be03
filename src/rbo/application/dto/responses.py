from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountMinor: int
    currency: str
    formatted: str


class TableResponse(BaseModel):
    tableId: str
    name: str
    capacity: int
    status: str
    orderId: str | None = None
    location: str
    section: str


class TableListResponse(BaseModel):
    tables: list[TableResponse] = Field(default_factory=list)


class FloorPlanResponse(BaseModel):
    mainFloor: list[TableResponse] = Field(default_factory=list)
    topFloor: list[TableResponse] = Field(default_factory=list)


class TableUpdateResponse(BaseModel):
    updated: bool


class OrderItemResponse(BaseModel):
    itemId: str
    name: str
    category: str | None = None
    quantity: int
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse
    selectedVariant: str | None = None


class CustomerResponse(BaseModel):
    name: str
    phone: str
    email: str | None = None
    address: str | None = None
    specialInstructions: str | None = None


class OrderResponse(BaseModel):
    orderId: str
    status: str
    paymentStatus: str
    paymentMethod: str | None = None
    orderType: str
    tableId: str | None = None
    customer: CustomerResponse | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)
    total: MoneyResponse
    createdAt: datetime
    updatedAt: datetime | None = None
    completedAt: datetime | None = None
    paidAt: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)


class ActiveOrderResponse(OrderResponse):
    tableStatus: str | None = None


class ActiveOrderListResponse(BaseModel):
    orders: list[ActiveOrderResponse] = Field(default_factory=list)


class ItemTallyResponse(BaseModel):
    id: str
    name: str
    category: str
    quantity: int
    revenue: int


class CategoryRevenueResponse(BaseModel):
    category: str
    revenue: int


class OrderStatsResponse(BaseModel):
    totalOrders: int
    totalRevenue: int
    averageOrderValue: int
    cancelRate: float
    currency: str
    topSellingItems: list[ItemTallyResponse] = Field(default_factory=list)
    revenueByCategory: list[CategoryRevenueResponse] = Field(default_factory=list)


class RevenueBucketResponse(BaseModel):
    totalRevenue: int
    orderCount: int


class ItemRevenueResponse(BaseModel):
    id: str
    name: str
    category: str
    totalQuantity: int
    totalRevenue: int


class RevenueReportResponse(BaseModel):
    currency: str
    dailyData: dict[str, RevenueBucketResponse] = Field(default_factory=dict)
    monthlyData: dict[str, RevenueBucketResponse] = Field(default_factory=dict)
    topItems: list[ItemRevenueResponse] = Field(default_factory=list)
