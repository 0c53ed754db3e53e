# backend/routes/cart.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config import settings as app_settings
from core import pricing
from core.cart import Cart
from database import get_db
from dependencies import get_cart_session, get_store_settings
from schemas.cart import CartAddItem, CartItemOut, CartOut, CartUpdateItem
from schemas.settings import StoreSettingsOut
from services import cart_store

router = APIRouter(prefix="/cart", tags=["Cart"])

ServiceQuery = Optional[Literal["delivery", "pickup"]]


# Build the cart summary with totals under the current store settings
def _cart_out(cart: Cart, store: StoreSettingsOut, service_option: Optional[str]) -> CartOut:
    items = [
        CartItemOut(
            line_id=line.line_id,
            menu_item_id=line.menu_item_id,
            name=line.name,
            quantity=line.quantity,
            unit_price=round(line.unit_price, 2),
            variant=line.variant.to_dict() if line.variant else None,
            addons=[a.to_dict() for a in line.addons],
            instructions=line.instructions,
            image_url=line.image_url,
            line_total=round(line.total, 2),
        )
        for line in cart.lines
    ]
    fee = pricing.delivery_fee(service_option, app_settings.DELIVERY_FEE) if not cart.is_empty() else 0.0
    return CartOut(
        items=items,
        subtotal=round(cart.subtotal(), 2),
        vat_amount=round(cart.vat(store), 2),
        delivery_fee=round(fee, 2),
        total=round(cart.total(store, service_option, app_settings.DELIVERY_FEE) if items else 0.0, 2),
    )


# Retrieve the current cart
@router.get("", response_model=CartOut)
def get_cart(
    service_option: ServiceQuery = Query(None),
    session_key: str = Depends(get_cart_session),
    store: StoreSettingsOut = Depends(get_store_settings),
    db: Session = Depends(get_db),
):
    return _cart_out(cart_store.load_cart(db, session_key), store, service_option)


# Add a configured item as a new line
@router.post("/items", response_model=CartOut, status_code=201)
def add_item(
    payload: CartAddItem,
    service_option: ServiceQuery = Query(None),
    session_key: str = Depends(get_cart_session),
    store: StoreSettingsOut = Depends(get_store_settings),
    db: Session = Depends(get_db),
):
    cart, _ = cart_store.add_item(
        db, session_key,
        menu_item_id=payload.menu_item_id,
        quantity=payload.quantity,
        variant_id=payload.variant_id,
        addon_ids=payload.addon_ids,
        instructions=payload.instructions or "",
    )
    return _cart_out(cart, store, service_option)


# Change line quantity; zero or less removes the line
@router.patch("/items/{line_id}", response_model=CartOut)
def update_item(
    line_id: str,
    payload: CartUpdateItem,
    service_option: ServiceQuery = Query(None),
    session_key: str = Depends(get_cart_session),
    store: StoreSettingsOut = Depends(get_store_settings),
    db: Session = Depends(get_db),
):
    cart = cart_store.set_quantity(db, session_key, line_id, payload.quantity)
    return _cart_out(cart, store, service_option)


# Remove a single line (unknown ids are ignored)
@router.delete("/items/{line_id}", response_model=CartOut)
def remove_item(
    line_id: str,
    service_option: ServiceQuery = Query(None),
    session_key: str = Depends(get_cart_session),
    store: StoreSettingsOut = Depends(get_store_settings),
    db: Session = Depends(get_db),
):
    cart = cart_store.remove_line(db, session_key, line_id)
    return _cart_out(cart, store, service_option)


@router.delete("", response_model=CartOut)
def clear_cart(
    session_key: str = Depends(get_cart_session),
    store: StoreSettingsOut = Depends(get_store_settings),
    db: Session = Depends(get_db),
):
    return _cart_out(cart_store.clear(db, session_key), store, None)
