"""
Unit tests for the multi-item cart.
"""

from decimal import Decimal

import pytest

from conftest import make_phase, make_subscription_item
from discounts import Cart, CartItem, DiscountError, ErrorKind


@pytest.fixture
def cart(plain_item) -> Cart:
    return Cart(cartItems=[plain_item])


class TestCartItems:
    """Adding, finding and removing items."""

    def test_items(self, cart):
        assert len(cart.items()) == 1
        assert cart.size() == 1
        assert not cart.is_empty()

    def test_set_items(self):
        cart = Cart()
        with pytest.raises(DiscountError):
            cart.set_items([])
        cart.set_items([CartItem(skuId="test2", quantity=1, unitPrice=Decimal("20"))])
        assert cart.size() == 1

    def test_add_new_item(self, cart):
        cart.add_item(CartItem(skuId="test2", quantity=1, unitPrice=Decimal("20")))
        assert cart.size() == 2

    def test_add_existing_sku_merges_quantity(self, cart):
        cart.add_item(CartItem(skuId="test1", quantity=1, unitPrice=Decimal("10")))
        assert cart.size() == 1
        assert cart.get_item("test1").quantity == 3

    def test_add_invalid_item(self, cart):
        with pytest.raises(DiscountError):
            cart.add_item(CartItem(skuId="bad", quantity=-1, unitPrice=Decimal("10")))
        assert cart.size() == 1

    def test_remove_item(self, cart):
        cart.remove_item("test1")
        assert cart.is_empty()
        with pytest.raises(DiscountError) as exc_info:
            cart.remove_item("nonexistent")
        assert exc_info.value.kind == ErrorKind.NOT_FOUND

    def test_get_and_has_item(self, cart):
        assert cart.get_item("test1").skuId == "test1"
        assert cart.has_item("test1")
        assert not cart.has_item("nonexistent")
        with pytest.raises(DiscountError):
            cart.get_item("nonexistent")

    def test_clear(self, cart):
        cart.clear()
        assert cart.size() == 0
        assert cart.is_empty()


class TestCartUpdates:
    """Changing items already in the cart."""

    def test_update_item(self, cart):
        cart.update_item("test1", 3, "15.0", "2.0", 2)
        item = cart.get_item("test1")
        assert item.quantity == 3
        assert item.unitPrice == Decimal("15.0")
        assert item.discountValuePerDiscountedUnit == Decimal("2.0")
        assert item.numberOfUnitsDiscounted == 2

    def test_update_with_bad_price_changes_nothing(self, cart):
        with pytest.raises(DiscountError) as exc_info:
            cart.update_item("test1", 3, "fifteen", "2.0", 2)
        assert exc_info.value.kind == ErrorKind.DECIMAL_PARSE
        assert cart.get_item("test1").quantity == 2

    def test_increment_and_decrement(self, cart):
        assert cart.increment_item("test1", 1) == 3
        assert cart.decrement_item("test1", 2) == 1
        with pytest.raises(DiscountError):
            cart.increment_item("nonexistent", 1)
        with pytest.raises(DiscountError):
            cart.decrement_item("nonexistent", 1)


class TestCartTotals:
    """Totals across items, rounded to cents."""

    def test_item_totals(self, cart, plain_item):
        assert Cart.item_gross_total(plain_item) == Decimal("20.00")
        assert Cart.item_net_total(plain_item) == Decimal("19.00")

    def test_totals(self, cart):
        assert cart.total_gross() == Decimal("20.00")
        assert cart.total_discount() == Decimal("1.00")
        assert cart.total_net() == Decimal("19.00")
        assert cart.total_discounted_units() == 1

    def test_mixed_cart(self, cart):
        cart.add_item(make_subscription_item(phases=[make_phase(duration=2, applicableNumberOfBillingCycles=3)]))
        assert cart.total_gross() == Decimal("30.00")
        assert cart.total_discount() == Decimal("11.00")
        assert cart.total_net() == Decimal("19.00")

    def test_invalid_item_fails_totals(self, cart):
        cart.get_item("test1").unitPrice = Decimal("-10")
        with pytest.raises(DiscountError):
            cart.total_net()
