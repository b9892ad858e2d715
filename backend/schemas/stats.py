# backend/schemas/stats.py
from datetime import datetime
from typing import List

from models.order import OrderStatus
from schemas.base import ORMBase


class DailySales(ORMBase):
    date: str
    total: int


# Schema for top selling products
class TopProduct(ORMBase):
    id: str
    name: str
    category: str
    units_sold: int
    revenue: int


class RecentOrder(ORMBase):
    id: int
    order_number: str
    customer_name: str
    date: datetime
    total: int
    status: OrderStatus


class DashboardStats(ORMBase):
    sales_today: int
    pending_orders: int
    low_stock_products: int
    new_customers: int
    sales_last_7_days: List[DailySales]
    top_products: List[TopProduct]
    recent_orders: List[RecentOrder]
