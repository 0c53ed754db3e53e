# core/cart.py
# Cart aggregate for one customer session.
#
# Lines keep insertion order and carry their own identity, so the same menu
# item may appear on several lines. The unit price is captured when a line is
# added; later menu price changes do not touch lines already in the cart.
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from core import pricing
from core.exceptions import ValidationError


@dataclass(frozen=True)
class PricedOption:
    """A variant or add-on as selected on a cart line."""
    id: str
    name: str
    price: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "price": self.price}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PricedOption":
        return cls(id=str(data["id"]), name=data["name"], price=float(data["price"]))


@dataclass
class CartLine:
    line_id: str
    menu_item_id: int
    name: str
    unit_price: float
    quantity: int
    variant: Optional[PricedOption] = None
    addons: List[PricedOption] = field(default_factory=list)
    instructions: str = ""
    category: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def total(self) -> float:
        return pricing.line_total(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_id": self.line_id,
            "menu_item_id": self.menu_item_id,
            "name": self.name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "variant": self.variant.to_dict() if self.variant else None,
            "addons": [a.to_dict() for a in self.addons],
            "instructions": self.instructions,
            "category": self.category,
            "image_url": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        variant = data.get("variant")
        return cls(
            line_id=data["line_id"],
            menu_item_id=data["menu_item_id"],
            name=data["name"],
            unit_price=float(data["unit_price"]),
            quantity=int(data["quantity"]),
            variant=PricedOption.from_dict(variant) if variant else None,
            addons=[PricedOption.from_dict(a) for a in data.get("addons") or []],
            instructions=data.get("instructions") or "",
            category=data.get("category"),
            image_url=data.get("image_url"),
        )


def _unique_addons(addons: Iterable[PricedOption]) -> List[PricedOption]:
    # Add-on selection is a set keyed by id; first occurrence wins
    seen = set()
    out = []
    for addon in addons:
        if addon.id in seen:
            continue
        seen.add(addon.id)
        out.append(addon)
    return out


class Cart:
    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self._lines: List[CartLine] = list(lines or [])

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, line_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.line_id == line_id:
                return line
        return None

    def add_line(
        self,
        item,
        quantity: int,
        variant: Optional[PricedOption] = None,
        addons: Optional[Iterable[PricedOption]] = None,
        instructions: str = "",
    ) -> str:
        """Append a new line for ``item`` and return its line id.

        Identical selections are not merged; every call creates a line.
        """
        if isinstance(quantity, bool) or int(quantity) != quantity or quantity < 1:
            raise ValidationError("Quantity must be a whole number of at least 1",
                                  details={"quantity": quantity})

        line = CartLine(
            line_id=str(uuid.uuid4()),
            menu_item_id=item.id,
            name=item.name,
            unit_price=pricing.effective_unit_price(item, variant),
            quantity=int(quantity),
            variant=variant,
            addons=_unique_addons(addons or []),
            instructions=instructions or "",
            category=getattr(item, "category", None),
            image_url=getattr(item, "image_url", None),
        )
        self._lines.append(line)
        return line.line_id

    def remove_line(self, line_id: str) -> None:
        self._lines = [l for l in self._lines if l.line_id != line_id]

    def set_quantity(self, line_id: str, quantity: int) -> None:
        if isinstance(quantity, bool) or int(quantity) != quantity:
            raise ValidationError("Quantity must be a whole number", details={"quantity": quantity})
        if quantity <= 0:
            self.remove_line(line_id)
            return
        line = self.get_line(line_id)
        if line is not None:
            line.quantity = int(quantity)

    def clear(self) -> None:
        self._lines = []

    def subtotal(self) -> float:
        return pricing.cart_subtotal(self._lines)

    def vat(self, settings) -> float:
        return pricing.vat_amount(self.subtotal(), settings)

    def total(self, settings, service_option: Optional[str] = None,
              fee: float = pricing.DEFAULT_DELIVERY_FEE) -> float:
        return pricing.cart_total(self._lines, settings, service_option, fee)

    def to_dict(self) -> Dict[str, Any]:
        return {"lines": [l.to_dict() for l in self._lines]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cart":
        return cls(CartLine.from_dict(l) for l in data.get("lines") or [])
