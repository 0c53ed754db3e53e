# services/cart_store.py
# Persists a session's cart aggregate so it survives page reloads.
# Line ids and order are stored as-is and restored verbatim.
import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from core.cart import Cart, CartLine, PricedOption
from core.exceptions import MenuItemNotFoundError, ValidationError
from models.cart import Cart as CartRow, CartItem
from models.menu import MenuItem

logger = logging.getLogger(__name__)


def _get_row(db: Session, session_key: str) -> Optional[CartRow]:
    return db.query(CartRow).filter(CartRow.session_key == session_key).first()


def _get_or_create_row(db: Session, session_key: str) -> CartRow:
    row = _get_row(db, session_key)
    if not row:
        row = CartRow(session_key=session_key)
        db.add(row)
        db.flush()
    return row


def _line_from_row(it: CartItem) -> CartLine:
    return CartLine(
        line_id=it.line_id,
        menu_item_id=it.menu_item_id,
        name=it.name,
        unit_price=it.unit_price_snapshot,
        quantity=it.quantity,
        variant=PricedOption.from_dict(it.selected_variant) if it.selected_variant else None,
        addons=[PricedOption.from_dict(a) for a in it.selected_addons or []],
        instructions=it.instructions or "",
        category=it.category,
        image_url=it.image_url,
    )


def load_cart(db: Session, session_key: str) -> Cart:
    row = _get_row(db, session_key)
    if not row:
        return Cart()
    return Cart(_line_from_row(it) for it in row.items)


def save_cart(db: Session, session_key: str, cart: Cart, commit: bool = True) -> None:
    row = _get_or_create_row(db, session_key)
    row.items = [
        CartItem(
            line_id=line.line_id,
            position=pos,
            menu_item_id=line.menu_item_id,
            name=line.name,
            category=line.category,
            image_url=line.image_url,
            quantity=line.quantity,
            unit_price_snapshot=line.unit_price,
            selected_variant=line.variant.to_dict() if line.variant else None,
            selected_addons=[a.to_dict() for a in line.addons],
            instructions=line.instructions,
        )
        for pos, line in enumerate(cart.lines)
    ]
    if commit:
        db.commit()


def _options(raw: Optional[Iterable[dict]]) -> List[PricedOption]:
    return [PricedOption.from_dict(o) for o in raw or []]


def resolve_selection(
    item: MenuItem, variant_id: Optional[str], addon_ids: Iterable[str]
) -> Tuple[Optional[PricedOption], List[PricedOption]]:
    """Map the ids a customer picked onto the item's own variants and add-ons."""
    variants = {v.id: v for v in _options(item.variants)}
    addons = {a.id: a for a in _options(item.addons)}

    variant = None
    if variant_id is not None:
        variant = variants.get(str(variant_id))
        if variant is None:
            raise ValidationError("Unknown variant for this item",
                                  details={"menu_item_id": item.id, "variant_id": variant_id})
    elif variants:
        raise ValidationError("Choose a variant for this item", details={"menu_item_id": item.id})

    selected = []
    for addon_id in addon_ids:
        addon = addons.get(str(addon_id))
        if addon is None:
            raise ValidationError("Unknown add-on for this item",
                                  details={"menu_item_id": item.id, "addon_id": addon_id})
        selected.append(addon)
    return variant, selected


def add_item(
    db: Session,
    session_key: str,
    menu_item_id: int,
    quantity: int,
    variant_id: Optional[str] = None,
    addon_ids: Iterable[str] = (),
    instructions: str = "",
) -> Tuple[Cart, str]:
    item = db.query(MenuItem).filter(MenuItem.id == menu_item_id).first()
    if not item:
        raise MenuItemNotFoundError("Menu item not found", details={"menu_item_id": menu_item_id})
    if not item.in_stock:
        raise ValidationError("Item is out of stock", details={"menu_item_id": menu_item_id})

    variant, addons = resolve_selection(item, variant_id, addon_ids)
    cart = load_cart(db, session_key)
    line_id = cart.add_line(item, quantity, variant=variant, addons=addons, instructions=instructions)
    save_cart(db, session_key, cart)
    logger.debug("Cart %s: added line %s (%s x%s)", session_key, line_id, item.name, quantity)
    return cart, line_id


def set_quantity(db: Session, session_key: str, line_id: str, quantity: int) -> Cart:
    cart = load_cart(db, session_key)
    cart.set_quantity(line_id, quantity)
    save_cart(db, session_key, cart)
    return cart


def remove_line(db: Session, session_key: str, line_id: str) -> Cart:
    cart = load_cart(db, session_key)
    cart.remove_line(line_id)
    save_cart(db, session_key, cart)
    return cart


def clear(db: Session, session_key: str, commit: bool = True) -> Cart:
    cart = Cart()
    if _get_row(db, session_key) is not None:
        save_cart(db, session_key, cart, commit=commit)
    return cart
