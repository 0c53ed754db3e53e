# services/messaging.py
# Order summary the customer forwards to the restaurant over chat.
from urllib.parse import quote

CHAT_BASE_URL = "https://wa.me"


def _item_line(item) -> str:
    text = f"{item.quantity}x {item.name}"
    if item.selected_variant:
        text += f" ({item.selected_variant.name})"
    if item.selected_addons:
        text += " + " + ", ".join(a.name for a in item.selected_addons)
    return text


def order_message(order, currency: str = "$") -> str:
    """Plain-text summary of an ``OrderResponse``."""
    items = "\n".join(_item_line(it) for it in order.items)
    return (
        f"New Order {order.order_code}\n"
        f"Name: {order.customer_name}\n"
        f"Phone: {order.customer_phone}\n\n"
        f"{items}\n\n"
        f"Total: {currency}{order.total:.2f}"
    )


def chat_link(number: str, message: str) -> str:
    digits = "".join(ch for ch in number if ch.isdigit())
    return f"{CHAT_BASE_URL}/{digits}?text={quote(message, safe='')}"
