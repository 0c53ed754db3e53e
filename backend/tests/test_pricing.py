from types import SimpleNamespace

import pytest

from core import pricing
from core.cart import Cart, PricedOption


def opt(id_, price, name=None):
    return PricedOption(id=id_, name=name or id_, price=price)


def item(price, id_=1, name="Item"):
    return SimpleNamespace(id=id_, name=name, price=price, category=None, image_url=None)


VAT_15 = SimpleNamespace(vat_enabled=True, vat_percentage=15)
VAT_OFF = SimpleNamespace(vat_enabled=False, vat_percentage=15)


class TestUnitPrice:
    def test_variant_replaces_base_price(self):
        assert pricing.effective_unit_price(item(10), opt("v", 14.5)) == 14.5

    def test_base_price_without_variant(self):
        assert pricing.effective_unit_price(item(10)) == 10.0


class TestLineTotal:
    def test_addons_are_added_per_unit(self):
        line = SimpleNamespace(unit_price=10, addons=[opt("a", 1.5), opt("b", 2.0)], quantity=2)
        assert pricing.line_total(line) == pytest.approx(27.0)

    def test_double_patty_with_bacon(self):
        cart = Cart()
        line_id = cart.add_line(item(16.50), 2, variant=opt("double", 16.50, "Double Patty"),
                                addons=[opt("bacon", 2.00, "Bacon")])
        assert cart.get_line(line_id).total == pytest.approx(37.00)
        assert cart.subtotal() == pytest.approx(37.00)


class TestVatAndTotal:
    def test_vat_enabled(self):
        assert pricing.vat_amount(100, VAT_15) == pytest.approx(15.0)

    def test_vat_disabled_or_missing(self):
        assert pricing.vat_amount(100, VAT_OFF) == 0.0
        assert pricing.vat_amount(100, None) == 0.0

    def test_cart_total_with_vat(self):
        cart = Cart()
        cart.add_line(item(100), 1)
        assert cart.total(VAT_15) == pytest.approx(115.0)

    def test_delivery_fee_only_for_delivery(self):
        cart = Cart()
        cart.add_line(item(100), 1)
        assert cart.total(VAT_15, "delivery") == pytest.approx(118.99)
        assert cart.total(VAT_15, "pickup") == pytest.approx(115.0)
        assert pricing.delivery_fee(None) == 0.0

    def test_empty_cart_is_zero(self):
        assert Cart().subtotal() == 0.0
        assert Cart().vat(VAT_15) == 0.0
