# services/orders.py
# Checkout, admin edits and the status workflow on top of the database.
import logging
import random
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from core import pricing
from core.exceptions import (
    EmptyCartError, OrderNotFoundError, PersistenceError, StaleOrderStatusError,
    StoreClosedError, ValidationError,
)
from core.order_flow import (
    ACTIVE_STATUSES, HistoryEntry, OrderAction, OrderStatus, StatusChange,
    allowed_actions, initial_status, plan_revert, plan_transition,
)
from core.reports import ReportLine, ReportOrder
from models.order import Order, OrderItem, OrderStatusHistory
from schemas.order import CheckoutPayload, OrderEditPayload, OrderItemOut, OrderResponse
from schemas.settings import StoreSettingsOut
from services import cart_store
from services.realtime import ChangeFeed, INSERT, UPDATE

logger = logging.getLogger(__name__)

TABLE = "orders"
ORDER_CODE_ATTEMPTS = 20


# ---- serialisation ----

def _addons_sum(addons) -> float:
    return float(sum(float(a.get("price", 0)) for a in addons or []))


def order_to_out(order: Order) -> OrderResponse:
    items = [
        OrderItemOut(
            menu_item_id=it.menu_item_id,
            name=it.name,
            quantity=it.quantity,
            price=round(it.price, 2),
            selected_variant=it.selected_variant,
            selected_addons=it.selected_addons,
            instructions=it.instructions,
            line_total=round((it.price + _addons_sum(it.selected_addons)) * it.quantity, 2),
        )
        for it in order.items
    ]
    return OrderResponse(
        id=order.id,
        order_code=order.order_code,
        status=order.status,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        service_option=order.service_option,
        delivery_address=order.delivery_address,
        payment_method=order.payment_method,
        notes=order.notes,
        total=round(order.total, 2),
        vat_amount=round(order.vat_amount, 2) if order.vat_amount is not None else None,
        created_at=order.created_at,
        items=items,
        allowed_actions=list(allowed_actions(order.status)),
    )


def order_record(order: Order) -> dict:
    return order_to_out(order).model_dump(mode="json")


def _publish(feed: Optional[ChangeFeed], event: str, order: Order) -> None:
    if feed is not None:
        feed.publish(TABLE, event, order_record(order))


# ---- lookups ----

def get_order(db: Session, order_id: int) -> Order:
    order = (db.query(Order)
             .options(joinedload(Order.items))
             .filter(Order.id == order_id)
             .first())
    if not order:
        raise OrderNotFoundError("Order not found", error_code="ORDER_NOT_FOUND",
                                 details={"order_id": order_id})
    return order


def list_orders(db: Session, status: Optional[str] = None) -> List[Order]:
    q = db.query(Order).options(joinedload(Order.items))
    if status and status != "all":
        q = q.filter(Order.status == status)
    return q.order_by(Order.created_at.desc(), Order.id.desc()).all()


def load_history(db: Session, order_id: int) -> List[OrderStatusHistory]:
    # Newest first; id breaks ties between rows written in the same second
    return (db.query(OrderStatusHistory)
            .filter(OrderStatusHistory.order_id == order_id)
            .order_by(OrderStatusHistory.changed_at.desc(), OrderStatusHistory.id.desc())
            .all())


# ---- checkout ----

def generate_order_code(db: Session, rng: Optional[random.Random] = None) -> str:
    """Short human-readable code, unique among orders still in progress."""
    rng = rng or random.Random()
    active = [s.value for s in ACTIVE_STATUSES]
    for attempt in range(ORDER_CODE_ATTEMPTS):
        code = "#" + str(rng.randint(100, 999))
        taken = db.query(Order.id).filter(Order.order_code == code, Order.status.in_(active)).first()
        if not taken:
            return code
    # Three digits exhausted for now; widen the code instead of failing checkout
    logger.warning("Order code space crowded after %s attempts, using 6 digits", ORDER_CODE_ATTEMPTS)
    return "#" + str(rng.randint(100000, 999999))


def _check_store_accepts(settings: StoreSettingsOut, service_option: str) -> None:
    if not settings.is_open:
        raise StoreClosedError("Sorry, the store is currently closed.", error_code="STORE_CLOSED")
    if service_option == pricing.SERVICE_DELIVERY and not settings.is_delivery_enabled:
        raise StoreClosedError("Delivery is not available right now", error_code="SERVICE_UNAVAILABLE",
                               details={"service_option": service_option})
    if service_option == pricing.SERVICE_PICKUP and not settings.is_pickup_enabled:
        raise StoreClosedError("Pickup is not available right now", error_code="SERVICE_UNAVAILABLE",
                               details={"service_option": service_option})


def checkout(
    db: Session,
    session_key: str,
    payload: CheckoutPayload,
    settings: StoreSettingsOut,
    delivery_fee: float = pricing.DEFAULT_DELIVERY_FEE,
    feed: Optional[ChangeFeed] = None,
) -> Order:
    """Turn the session's cart into an order.

    The order row, its items and the emptied cart are committed together;
    on failure nothing is written and the cart is left as it was.
    """
    cart = cart_store.load_cart(db, session_key)
    if cart.is_empty():
        raise EmptyCartError("Cart is empty", error_code="EMPTY_CART")
    _check_store_accepts(settings, payload.service_option)

    subtotal = cart.subtotal()
    vat = pricing.vat_amount(subtotal, settings)
    total = subtotal + vat + pricing.delivery_fee(payload.service_option, delivery_fee)

    order = Order(
        order_code=generate_order_code(db),
        status=initial_status(settings.webhook_url).value,
        total=total,
        vat_amount=vat,
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        service_option=payload.service_option,
        delivery_address=payload.delivery_address if payload.service_option == pricing.SERVICE_DELIVERY else None,
        payment_method=payload.payment_method,
        notes=payload.notes,
    )
    order.items = [
        OrderItem(
            menu_item_id=line.menu_item_id,
            name=line.name,
            quantity=line.quantity,
            price=line.unit_price,
            selected_variant=line.variant.to_dict() if line.variant else None,
            selected_addons=[a.to_dict() for a in line.addons],
            instructions=line.instructions or None,
        )
        for line in cart.lines
    ]
    db.add(order)

    try:
        cart_store.clear(db, session_key, commit=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Checkout failed for cart %s", session_key)
        raise PersistenceError("Failed to place order. Please try again.",
                               error_code="ORDER_CREATE_FAILED") from e

    db.refresh(order)
    logger.info("Order %s (%s) placed: %s lines, total %.2f, status %s",
                order.id, order.order_code, len(order.items), order.total, order.status)
    _publish(feed, INSERT, order)
    return order


# ---- admin edits ----

def edit_order(db: Session, order_id: int, payload: OrderEditPayload,
               feed: Optional[ChangeFeed] = None) -> Order:
    order = get_order(db, order_id)
    changes = payload.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(order, key, value.strip() if isinstance(value, str) else value)

    if not (order.customer_name or "").strip() or not (order.customer_phone or "").strip():
        db.rollback()
        raise ValidationError("Customer name and phone are required")
    if order.service_option == pricing.SERVICE_DELIVERY and not (order.delivery_address or "").strip():
        db.rollback()
        raise ValidationError("Delivery address is required for delivery orders")

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Failed to save order changes") from e
    db.refresh(order)
    _publish(feed, UPDATE, order)
    return order


# ---- status workflow ----

def _history_views(rows: Iterable[OrderStatusHistory]) -> List[HistoryEntry]:
    return [HistoryEntry(r.id, r.old_status, r.new_status, r.changed_at) for r in rows]


def _check_expected(order: Order, expected_status: Optional[OrderStatus]) -> None:
    if expected_status is not None and order.status != OrderStatus(expected_status).value:
        raise StaleOrderStatusError(
            "Order status changed, please refresh",
            error_code="STATUS_CHANGED",
            details={"order_id": order.id, "expected_status": OrderStatus(expected_status).value,
                     "current_status": order.status},
        )


def _commit_change(db: Session, order: Order, change: StatusChange, user_id: Optional[int]) -> Order:
    """Conditional status update plus one history row, as a single commit."""
    try:
        updated = (db.query(Order)
                   .filter(Order.id == order.id, Order.status == change.old_status.value)
                   .update({Order.status: change.new_status.value}, synchronize_session=False))
        if updated != 1:
            db.rollback()
            raise StaleOrderStatusError(
                "Order status changed, please refresh",
                error_code="STATUS_CHANGED",
                details={"order_id": order.id, "expected_status": change.old_status.value},
            )
        db.add(OrderStatusHistory(
            order_id=order.id,
            old_status=change.old_status.value,
            new_status=change.new_status.value,
            changed_by=user_id,
        ))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Status change %s -> %s failed for order %s",
                         change.old_status.value, change.new_status.value, order.id)
        raise PersistenceError("Failed to update order status", error_code="STATUS_UPDATE_FAILED") from e

    db.refresh(order)
    logger.info("Order %s: %s -> %s", order.id, change.old_status.value, change.new_status.value)
    return order


def transition(
    db: Session,
    order_id: int,
    action: OrderAction,
    expected_status: Optional[OrderStatus] = None,
    user_id: Optional[int] = None,
    feed: Optional[ChangeFeed] = None,
) -> Order:
    order = get_order(db, order_id)
    _check_expected(order, expected_status)
    change = plan_transition(expected_status or order.status, action)
    _commit_change(db, order, change, user_id)
    _publish(feed, UPDATE, order)
    return order


def revert(
    db: Session,
    order_id: int,
    entry_id: Optional[int] = None,
    expected_status: Optional[OrderStatus] = None,
    user_id: Optional[int] = None,
    feed: Optional[ChangeFeed] = None,
) -> Order:
    order = get_order(db, order_id)
    _check_expected(order, expected_status)
    history = _history_views(load_history(db, order_id))
    change = plan_revert(expected_status or order.status, history, entry_id)
    _commit_change(db, order, change, user_id)
    _publish(feed, UPDATE, order)
    return order


# ---- reporting ----

def _report_order(order: Order) -> ReportOrder:
    lines = tuple(
        ReportLine(
            name=it.name,
            quantity=it.quantity,
            unit_price=it.price,
            addons_total=_addons_sum(it.selected_addons),
            category=it.menu_item.category if it.menu_item else None,
            image_url=it.menu_item.image_url if it.menu_item else None,
        )
        for it in order.items
    )
    return ReportOrder(
        order_code=order.order_code,
        total=order.total,
        vat_amount=order.vat_amount or 0.0,
        created_at=order.created_at,
        service_option=order.service_option,
        payment_method=order.payment_method,
        customer_name=order.customer_name,
        lines=lines,
    )


def load_report_orders(
    db: Session,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    statuses: Optional[Iterable[OrderStatus]] = (OrderStatus.COMPLETED,),
    exclude: Optional[Iterable[OrderStatus]] = None,
) -> List[ReportOrder]:
    q = db.query(Order).options(joinedload(Order.items).joinedload(OrderItem.menu_item))
    if statuses:
        q = q.filter(Order.status.in_([OrderStatus(s).value for s in statuses]))
    if exclude:
        q = q.filter(Order.status.notin_([OrderStatus(s).value for s in exclude]))
    if date_from:
        q = q.filter(Order.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        # End date covers the whole day
        q = q.filter(Order.created_at < datetime.combine(date_to + timedelta(days=1), time.min))
    rows = q.order_by(Order.created_at.asc(), Order.id.asc()).all()
    return [_report_order(o) for o in rows]
