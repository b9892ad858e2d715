# backend/routes/logs.py
import math
from datetime import date, timedelta
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.log import Log
from models.users import User
from schemas.log import LogEntry, LogPage
from schemas.product import Pagination
from utils.clock import start_of_day
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/api/admin/logs", tags=["Logs"])


def _to_entry(log: Log) -> LogEntry:
    return LogEntry(
        id=log.id,
        ts=log.ts,
        user_id=log.user_id,
        user_email=log.user.email if log.user else None,
        action=log.action,
        resource=log.resource,
        status=log.status,
        ip=log.ip,
        meta=log.meta,
    )


# Back-office activity feed: order creation, status changes, logins, registrations
@router.get("", response_model=LogPage)
def get_logs(
    action: Optional[str] = Query(None, description="ORDER_CREATE, ORDER_STATUS_CHANGE, LOGIN, REGISTER"),
    resource: Optional[str] = Query(None, description="orders or auth"),
    status: Optional[str] = Query(None, description="SUCCESS or FAIL"),
    orderNumber: Optional[str] = Query(None, description="Entries about a single order"),
    userId: Optional[int] = Query(None, description="Entries by the acting user"),
    dateFrom: Optional[date] = Query(None),
    dateTo: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    query = db.query(Log)

    if action:
        query = query.filter(Log.action == action.upper())
    if resource:
        query = query.filter(Log.resource == resource)
    if status:
        query = query.filter(Log.status == status.upper())
    if orderNumber:
        query = query.filter(Log.meta["order_number"].as_string() == orderNumber)
    if userId is not None:
        query = query.filter(Log.user_id == userId)
    if dateFrom:
        query = query.filter(Log.ts >= start_of_day(dateFrom))
    if dateTo:
        # Whole day inclusive
        query = query.filter(Log.ts < start_of_day(dateTo + timedelta(days=1)))

    total = query.count()
    logs = (
        query.order_by(Log.ts.desc(), Log.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return LogPage(
        items=[_to_entry(log) for log in logs],
        pagination=Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)),
    )
