# backend/routes/logs.py
from datetime import date, datetime, time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database import get_db
from models.log import Log
from models.users import User
from schemas.logs import AuditEntry, AuditPage
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/logs", tags=["Logs"])


def _day_bound(value: Optional[str], upper: bool = False) -> Optional[datetime]:
    """``YYYY-MM-DD`` (or a full ISO timestamp) to a filter bound; the upper bound covers the whole day."""
    if not value:
        return None
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            return datetime.combine(day, time.max if upper else time.min)
        return datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date: {value}")


@router.get("", response_model=AuditPage)
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Substring of the action, e.g. ORDER"),
    resource: Optional[str] = Query(None, description="orders, menu, categories, settings, auth"),
    status: Optional[str] = Query(None, description="SUCCESS or FAIL"),
    user_id: Optional[int] = Query(None),
    date_from: Optional[str] = Query(None),
    date_to: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    query = db.query(Log, User.email).outerjoin(User, User.id == Log.user_id)

    if action:
        query = query.filter(Log.action.ilike(f"%{action}%"))
    if resource:
        query = query.filter(Log.resource == resource.lower())
    if status:
        query = query.filter(Log.status == status.upper())
    if user_id is not None:
        query = query.filter(Log.user_id == user_id)

    lower = _day_bound(date_from)
    upper = _day_bound(date_to, upper=True)
    if lower:
        query = query.filter(Log.ts >= lower)
    if upper:
        query = query.filter(Log.ts <= upper)

    total = query.count()
    rows = (
        query.order_by(Log.ts.desc(), Log.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    items = [
        AuditEntry(
            id=log.id, ts=log.ts, action=log.action, resource=log.resource, status=log.status,
            user_id=log.user_id, user_email=email, ip=log.ip, meta=log.meta,
        )
        for log, email in rows
    ]
    return AuditPage(items=items, total=total, page=page, page_size=page_size)
