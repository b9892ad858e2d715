# backend/schemas/log.py
from datetime import datetime
from typing import Any, List, Optional

from schemas.base import ORMBase
from schemas.product import Pagination


# Single audit entry as shown in the back-office activity view
class LogEntry(ORMBase):
    id: int
    ts: datetime
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    meta: Optional[Any] = None


class LogPage(ORMBase):
    items: List[LogEntry]
    pagination: Pagination
