from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel


class AuditEntry(BaseModel):
    id: int
    ts: Optional[datetime] = None
    action: str
    resource: str
    status: str
    user_id: Optional[int] = None
    user_email: Optional[str] = None  # None for customers and unknown logins
    ip: Optional[str] = None
    meta: Optional[Any] = None


class AuditPage(BaseModel):
    items: List[AuditEntry]
    total: int
    page: int
    page_size: int
