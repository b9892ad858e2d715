# backend/routes/admin_orders.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.users import User
from models.order import Order, OrderStatus, PAID_STATUSES
from schemas.order import AdminOrderRow, AdminOrdersResponse, OrderStatusPatch, OrderDetail, OrderUpdated
from utils.audit import write_log, client_ip
from utils.clock import utc_now
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/api/admin/orders", tags=["Admin orders"])

ALL_STATUSES = "ALL"


def _matches(order: Order, search: str) -> bool:
    return (
        search in order.order_number
        or search in order.customer_name
        or search in order.customer_email
    )


def _order_to_row(order: Order) -> AdminOrderRow:
    return AdminOrderRow(
        id=order.id,
        order_number=order.order_number,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        total=order.total,
        status=order.status,
        created_at=order.created_at,
        item_count=len(order.items),
    )


# List orders for the back-office table, newest first, unpaginated
@router.get("", response_model=AdminOrdersResponse)
def list_orders(
    status: Optional[str] = Query(None, description="Order status or ALL"),
    search: Optional[str] = Query(None, description="Order number, customer name or email"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    query = db.query(Order).options(joinedload(Order.items))

    if status and status != ALL_STATUSES:
        try:
            query = query.filter(Order.status == OrderStatus(status))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Estado desconocido: {status}")

    if search:
        query = query.filter(or_(
            Order.order_number.contains(search, autoescape=True),
            Order.customer_name.contains(search, autoescape=True),
            Order.customer_email.contains(search, autoescape=True),
        ))

    orders: List[Order] = query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    # LIKE ignores case on SQLite; the search is case-sensitive
    if search:
        orders = [o for o in orders if _matches(o, search)]

    return AdminOrdersResponse(orders=[_order_to_row(o) for o in orders])


# Set an order's status. Any status may follow any other.
@router.patch("/{order_number}", response_model=OrderUpdated)
def update_order_status(
    order_number: str,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    order = db.query(Order).filter(Order.order_number == order_number).first()
    if not order:
        raise HTTPException(status_code=404, detail="Orden no encontrada")

    old_status, new_status = order.status, payload.status
    now = utc_now()

    order.status = new_status
    order.updated_at = now
    # Payment is simulated: the first move into a paid status records it
    if new_status in PAID_STATUSES and order.paid_at is None:
        order.paid_at = now
    db.commit()

    write_log(
        db, user_id=current_user.id, action="ORDER_STATUS_CHANGE", resource="orders", status="SUCCESS",
        ip=client_ip(request),
        meta={"order_number": order_number, "old": old_status.value, "new": new_status.value},
    )

    order = (
        db.query(Order)
        .options(joinedload(Order.items), joinedload(Order.address))
        .filter(Order.order_number == order_number)
        .first()
    )
    return OrderUpdated(message="Estado de orden actualizado", order=OrderDetail.model_validate(order))
