# backend/utils/order_numbers.py
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.order import Order, OrderSequence
from utils.clock import utc_now

ORDER_NUMBER_PREFIX = "ORD"
SEQUENCE_WIDTH = 5


def format_order_number(day: str, value: int) -> str:
    return f"{ORDER_NUMBER_PREFIX}-{day}-{value:0{SEQUENCE_WIDTH}d}"


def _highest_issued(db: Session, day: str) -> int:
    # Orders that predate the counter row for this day (imports, restores)
    prefix = f"{ORDER_NUMBER_PREFIX}-{day}-"
    last = db.query(func.max(Order.order_number)).filter(Order.order_number.startswith(prefix)).scalar()
    return int(last[len(prefix):]) if last else 0


def allocate_order_number(db: Session, now: Optional[datetime] = None) -> str:
    """Reserve the next ORD-YYYYMMDD-NNNNN number for ``now``'s calendar day.

    Runs inside the caller's transaction: the counter row is locked until the
    order itself is committed, so two checkouts cannot get the same number.
    A concurrent first insert for the same day surfaces as an IntegrityError
    and the caller retries.
    """
    day = (now or utc_now()).strftime("%Y%m%d")

    seq = (
        db.query(OrderSequence)
        .filter(OrderSequence.day == day)
        .with_for_update()
        .first()
    )
    if seq is None:
        seq = OrderSequence(day=day, last_value=_highest_issued(db, day))
        db.add(seq)

    seq.last_value += 1
    db.flush()
    return format_order_number(day, seq.last_value)
