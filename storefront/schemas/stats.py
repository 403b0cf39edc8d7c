# storefront/schemas/stats.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel

from storefront.schemas.order import OrderStatus


class TopProduct(SQLModel):
    """Best seller row: units sold and revenue at order-time prices."""

    product_id: uuid.UUID
    name: str
    total_quantity: int
    total_revenue: float


class LowStockProduct(SQLModel):
    product_id: uuid.UUID
    name: str
    stock_quantity: int


class LatestOrderSummary(SQLModel):
    id: uuid.UUID
    order_number: str
    created_at: datetime
    user_id: uuid.UUID
    full_name: str
    total_amount: float
    status: OrderStatus


class AdminDashboardStats(SQLModel):
    """
    Dashboard cards (counts, revenue) plus the low stock,
    best seller and recent order tables.
    """

    total_customers: int
    total_products: int
    total_orders: int
    total_revenue: float
    low_stock: list[LowStockProduct]
    top_products: list[TopProduct]
    latest_orders: list[LatestOrderSummary]
