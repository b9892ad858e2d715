# backend/routes/orders.py
import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.order import Order, OrderItem, Address, OrderStatus
from schemas.order import OrderCreate, OrderCreated, OrderDetail, OrderDetailResponse
from utils.audit import write_log, client_ip
from utils.clock import utc_now
from utils.mailer import send_order_confirmation
from utils.order_numbers import allocate_order_number
from utils.pricing import compute_totals, OrderTotals

router = APIRouter(prefix="/api/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

# Attempts at allocating a free order number when another checkout wins the race
MAX_ALLOCATION_ATTEMPTS = 3


def _load_order(db: Session, order_number: str) -> Order:
    return (
        db.query(Order)
        .options(joinedload(Order.items), joinedload(Order.address))
        .filter(Order.order_number == order_number)
        .first()
    )


def _persist_order(db: Session, payload: OrderCreate, totals: OrderTotals, now: datetime) -> Order:
    """Address, order and items in a single transaction."""
    order_number = allocate_order_number(db, now)

    shipping = payload.shipping
    address = Address(
        street=shipping.street,
        number=shipping.number,
        apartment=shipping.apartment,
        region=shipping.region,
        city=shipping.city,
        comuna=shipping.comuna,
        zip_code=shipping.zip_code,
    )

    customer = payload.customer
    order = Order(
        order_number=order_number,
        customer_email=customer.email,
        customer_name=f"{customer.first_name} {customer.last_name}",
        customer_phone=customer.phone,
        payment_method=payload.payment.method,
        subtotal=totals.subtotal,
        shipping=totals.shipping,
        tax=totals.tax,
        total=totals.total,
        status=OrderStatus.PENDING,
        address=address,
        created_at=now,
        updated_at=now,
        items=[
            OrderItem(
                product_id=item.id,
                product_name=item.name,
                artist=item.artist,
                category=item.category,
                quantity=item.quantity,
                price=item.price,
                image_url=item.image,
            )
            for item in payload.items
        ],
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


# Create an order from a submitted checkout draft
@router.post("", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    totals = compute_totals(((i.price, i.quantity) for i in payload.items), payload.subtotal)
    if payload.total != totals.total:
        logger.info("Client total %s differs from computed %s", payload.total, totals.total)

    order = None
    for attempt in range(1, MAX_ALLOCATION_ATTEMPTS + 1):
        try:
            order = _persist_order(db, payload, totals, utc_now())
            break
        except IntegrityError as e:
            db.rollback()
            logger.warning("Order number collision (attempt %s): %s", attempt, e)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error creating order")
            raise HTTPException(status_code=500, detail="Error al procesar la orden")

    if order is None:
        logger.error("Could not allocate an order number after %s attempts", MAX_ALLOCATION_ATTEMPTS)
        raise HTTPException(status_code=500, detail="Error al procesar la orden")

    # The order is already committed
    try:
        write_log(
            db, user_id=None, action="ORDER_CREATE", resource="orders", status="SUCCESS",
            ip=client_ip(request),
            meta={"order_number": order.order_number, "total": order.total, "items": len(order.items)},
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not write audit entry for %s", order.order_number)

    # Notification failures never undo the order
    await send_order_confirmation(order, payload.customer.first_name)

    return OrderCreated(
        message="Orden creada exitosamente",
        order_id=order.order_number,
        order_number=order.order_number,
    )


# Order detail for the confirmation page
@router.get("/{order_number}", response_model=OrderDetailResponse)
def get_order(order_number: str, db: Session = Depends(get_db)):
    order = _load_order(db, order_number)
    if not order:
        raise HTTPException(status_code=404, detail="Orden no encontrada")
    return OrderDetailResponse(order=OrderDetail.model_validate(order))
