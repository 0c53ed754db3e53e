# core/pricing.py
# Pricing rules for cart lines and carts.
#
# A selected variant replaces the item's base price, add-ons are added on top.
# Nothing here rounds; rounding to 2 decimals happens when a response is built.
from typing import Iterable, Optional, Protocol, Sequence

SERVICE_DELIVERY = "delivery"
SERVICE_PICKUP = "pickup"
SERVICE_OPTIONS = (SERVICE_DELIVERY, SERVICE_PICKUP)

DEFAULT_DELIVERY_FEE = 3.99


class Priced(Protocol):
    price: float


class VatPolicy(Protocol):
    vat_enabled: bool
    vat_percentage: float


def effective_unit_price(item: Priced, variant: Optional[Priced] = None) -> float:
    if variant is not None:
        return float(variant.price)
    return float(item.price)


def addons_total(addons: Iterable[Priced]) -> float:
    return float(sum(a.price for a in addons))


def line_total(line) -> float:
    # line.unit_price is the snapshot taken when the line was added
    return (line.unit_price + addons_total(line.addons)) * line.quantity


def cart_subtotal(lines: Sequence) -> float:
    return float(sum(line_total(line) for line in lines))


def vat_amount(subtotal: float, settings: Optional[VatPolicy]) -> float:
    if settings is None or not settings.vat_enabled:
        return 0.0
    return subtotal * float(settings.vat_percentage or 0) / 100


def delivery_fee(service_option: Optional[str], fee: float = DEFAULT_DELIVERY_FEE) -> float:
    return float(fee) if service_option == SERVICE_DELIVERY else 0.0


def cart_total(
    lines: Sequence,
    settings: Optional[VatPolicy],
    service_option: Optional[str] = None,
    fee: float = DEFAULT_DELIVERY_FEE,
) -> float:
    subtotal = cart_subtotal(lines)
    return subtotal + vat_amount(subtotal, settings) + delivery_fee(service_option, fee)
