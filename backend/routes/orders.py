# backend/routes/orders.py
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from config import settings as app_settings
from core.order_flow import OrderStatus
from database import get_db
from dependencies import get_cart_session, get_change_feed, get_store_settings
from models.users import User
from schemas.order import (
    CheckoutPayload, CheckoutResponse, HistoryEntryOut, OrderEditPayload,
    OrderResponse, OrderRevertPayload, OrderTransitionPayload,
)
from schemas.settings import StoreSettingsOut
from services import orders as order_service
from services.messaging import chat_link, order_message
from services.realtime import ChangeFeed
from services.webhook import order_webhook
from utils.audit import client_ip, write_log
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/orders", tags=["Orders"])

STATUS_VALUES = {s.value for s in OrderStatus}


# =========================
# CHECKOUT (PUBLIC)
# =========================
@router.post("/checkout", response_model=CheckoutResponse, status_code=201)
def checkout(
    payload: CheckoutPayload,
    background_tasks: BackgroundTasks,
    request: Request,
    session_key: str = Depends(get_cart_session),
    store: StoreSettingsOut = Depends(get_store_settings),
    feed: ChangeFeed = Depends(get_change_feed),
    db: Session = Depends(get_db),
):
    """
    Places the session's cart as an order.

    The webhook runs after the response is sent; its failure is only logged.
    The response carries the chat summary the customer forwards to the restaurant.
    """
    order = order_service.checkout(
        db, session_key, payload, store,
        delivery_fee=app_settings.DELIVERY_FEE,
        feed=feed,
    )
    out = order_service.order_to_out(order)

    if store.webhook_url:
        background_tasks.add_task(order_webhook.deliver_order, store.webhook_url, out.model_dump(mode="json"))

    write_log(db, user_id=None, action="ORDER_PLACED", resource="orders",
              ip=client_ip(request), meta={"order_id": out.id, "order_code": out.order_code,
                                           "total": out.total})

    message = order_message(out, currency=app_settings.CURRENCY_LABEL + " ")
    return CheckoutResponse(
        order=out,
        message=message,
        chat_url=chat_link(app_settings.WHATSAPP_NUMBER, message),
    )


# =========================
# ADMIN
# =========================
@router.get("", response_model=List[OrderResponse])
def list_orders(
    status: Optional[str] = Query(None, description="Status filter, 'all' for every order"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if status and status != "all" and status not in STATUS_VALUES:
        raise HTTPException(status_code=422, detail=f"Unknown order status: {status}")
    return [order_service.order_to_out(o) for o in order_service.list_orders(db, status)]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return order_service.order_to_out(order_service.get_order(db, order_id))


# Contact, address and notes only; status has its own endpoints
@router.patch("/{order_id}", response_model=OrderResponse)
def edit_order(
    order_id: int,
    payload: OrderEditPayload,
    request: Request,
    feed: ChangeFeed = Depends(get_change_feed),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    order = order_service.edit_order(db, order_id, payload, feed=feed)
    write_log(db, user_id=current_user.id, action="ORDER_EDIT", resource="orders",
              ip=client_ip(request), meta={"order_id": order_id,
                                           "fields": sorted(payload.model_dump(exclude_unset=True))})
    return order_service.order_to_out(order)


@router.post("/{order_id}/transitions", response_model=OrderResponse)
def transition_order(
    order_id: int,
    payload: OrderTransitionPayload,
    request: Request,
    feed: ChangeFeed = Depends(get_change_feed),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    order = order_service.transition(
        db, order_id, payload.action,
        expected_status=payload.expected_status,
        user_id=current_user.id,
        feed=feed,
    )
    write_log(db, user_id=current_user.id, action="ORDER_STATUS_CHANGE", resource="orders",
              ip=client_ip(request), meta={"order_id": order_id, "action": payload.action.value,
                                           "new_status": order.status})
    return order_service.order_to_out(order)


@router.get("/{order_id}/history", response_model=List[HistoryEntryOut])
def order_history(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    order = order_service.get_order(db, order_id)
    rows = order_service.load_history(db, order.id)
    out = []
    for idx, row in enumerate(rows):
        entry = HistoryEntryOut.model_validate(row)
        # Only the newest entry can be undone, and only while it still describes the order
        entry.revertible = idx == 0 and row.new_status == order.status
        out.append(entry)
    return out


@router.post("/{order_id}/revert", response_model=OrderResponse)
def revert_order(
    order_id: int,
    payload: OrderRevertPayload,
    request: Request,
    feed: ChangeFeed = Depends(get_change_feed),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    order = order_service.revert(
        db, order_id,
        entry_id=payload.entry_id,
        expected_status=payload.expected_status,
        user_id=current_user.id,
        feed=feed,
    )
    write_log(db, user_id=current_user.id, action="ORDER_STATUS_REVERT", resource="orders",
              ip=client_ip(request), meta={"order_id": order_id, "entry_id": payload.entry_id,
                                           "new_status": order.status})
    return order_service.order_to_out(order)
