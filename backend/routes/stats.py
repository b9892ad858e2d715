# backend/routes/stats.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import timedelta

from config import settings
from database import get_db
from utils.clock import utc_now, start_of_day
from utils.tokenJWT import require_admin
from models.users import User, CUSTOMER_ROLE
from models.order import Order, OrderItem, PAID_STATUSES, PENDING_STATUSES
from models.product import Product
from schemas.stats import DashboardStats, DailySales, TopProduct, RecentOrder

router = APIRouter(
    prefix="/api/admin/stats",
    tags=["Stats"]
)

TOP_PRODUCTS_LIMIT = 5
RECENT_ORDERS_LIMIT = 5
SALES_WINDOW_DAYS = 7


def _sales_last_days(db: Session, today, days: int):
    first_day = today - timedelta(days=days - 1)

    # Aggregate paid totals by day
    rows = (
        db.query(
            func.date(Order.paid_at).label("date"),
            func.sum(Order.total).label("total"),
        )
        .filter(Order.paid_at >= start_of_day(first_day), Order.status.in_(PAID_STATUSES))
        .group_by(func.date(Order.paid_at))
        .all()
    )
    by_date = {str(row.date): int(row.total or 0) for row in rows}

    # Fill missing dates with zero sales
    result = []
    for i in range(days):
        day = (first_day + timedelta(days=i)).strftime("%Y-%m-%d")
        result.append(DailySales(date=day, total=by_date.get(day, 0)))
    return result


def _top_products(db: Session):
    units = func.sum(OrderItem.quantity).label("units_sold")
    revenue = func.sum(OrderItem.quantity * OrderItem.price).label("revenue")
    rows = (
        db.query(
            OrderItem.product_id.label("id"),
            func.max(OrderItem.product_name).label("name"),
            func.max(OrderItem.category).label("category"),
            units,
            revenue,
        )
        .group_by(OrderItem.product_id)
        .order_by(units.desc(), revenue.desc())
        .limit(TOP_PRODUCTS_LIMIT)
        .all()
    )
    return [
        TopProduct(
            id=row.id,
            name=row.name,
            category=row.category or "",
            units_sold=int(row.units_sold),
            revenue=int(row.revenue),
        )
        for row in rows
    ]


# === Dashboard figures ===

@router.get("", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    now = utc_now()
    today = now.date()
    today_start = start_of_day(today)
    month_start = start_of_day(today.replace(day=1))

    # Cancelled orders keep their paid_at but are not sales
    sales_today = db.query(func.coalesce(func.sum(Order.total), 0)).filter(
        Order.paid_at >= today_start,
        Order.status.in_(PAID_STATUSES),
    ).scalar()

    pending_orders = db.query(Order).filter(Order.status.in_(PENDING_STATUSES)).count()

    # Products at or under their own minimum, or the shop-wide default
    low_stock_products = db.query(Product).filter(
        Product.stock <= func.coalesce(Product.min_stock, settings.LOW_STOCK_MINIMUM)
    ).count()

    new_customers = db.query(User).filter(
        User.role == CUSTOMER_ROLE,
        User.created_at >= month_start,
    ).count()

    recent = (
        db.query(Order)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(RECENT_ORDERS_LIMIT)
        .all()
    )

    return DashboardStats(
        sales_today=int(sales_today or 0),
        pending_orders=pending_orders,
        low_stock_products=low_stock_products,
        new_customers=new_customers,
        sales_last_7_days=_sales_last_days(db, today, SALES_WINDOW_DAYS),
        top_products=_top_products(db),
        recent_orders=[
            RecentOrder(
                id=o.id,
                order_number=o.order_number,
                customer_name=o.customer_name,
                date=o.created_at,
                total=o.total,
                status=o.status,
            )
            for o in recent
        ],
    )
