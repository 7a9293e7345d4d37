"""A cart of line items with rounded totals."""

from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from .cart_item import CartItem
from .errors import DiscountError
from .logger import get_logger
from .money import ZERO, parse_decimal, round_money

logger = get_logger("cart")


class Cart(BaseModel):
    cartItems: List[CartItem] = Field(default_factory=list)

    def items(self) -> List[CartItem]:
        return self.cartItems

    def set_items(self, items: List[CartItem]):
        if not items:
            raise DiscountError.validation("cart items cannot be empty")
        self.cartItems = list(items)

    def add_item(self, item: CartItem):
        """Add a validated item; an existing SKU just gains the new quantity."""
        item.validate_item()
        for existing in self.cartItems:
            if existing.skuId == item.skuId:
                existing.quantity += item.quantity
                logger.info("Merged %d unit(s) into cart item '%s'", item.quantity, item.skuId)
                return
        self.cartItems.append(item)

    def remove_item(self, sku_id: str):
        for index, item in enumerate(self.cartItems):
            if item.skuId == sku_id:
                del self.cartItems[index]
                return
        raise DiscountError.not_found(f"item '{sku_id}' not found")

    def get_item(self, sku_id: str) -> CartItem:
        for item in self.cartItems:
            if item.skuId == sku_id:
                return item
        raise DiscountError.not_found(f"item '{sku_id}' not found")

    def has_item(self, sku_id: str) -> bool:
        return any(item.skuId == sku_id for item in self.cartItems)

    def update_item(self, sku_id: str, quantity: int, unit_price: str, discount_amount: str, discounted_units: int):
        """Replace the pricing fields of an item, parsing the decimal strings first."""
        item = self.get_item(sku_id)
        price = parse_decimal(unit_price)
        discount = parse_decimal(discount_amount)
        item.set_quantity(quantity)
        item.set_unit_price(price)
        item.set_discount_amount_per_unit(discount)
        item.set_discounted_unit_quantity(discounted_units)

    def increment_item(self, sku_id: str, quantity: int) -> int:
        return self.get_item(sku_id).increment_quantity(quantity)

    def decrement_item(self, sku_id: str, quantity: int) -> int:
        return self.get_item(sku_id).decrement_quantity(quantity)

    def clear(self):
        self.cartItems = []

    def size(self) -> int:
        return len(self.cartItems)

    def is_empty(self) -> bool:
        return not self.cartItems

    # --- Totals, rounded to cents ---

    @staticmethod
    def item_net_total(item: CartItem) -> Decimal:
        return round_money(item.net_total())

    @staticmethod
    def item_gross_total(item: CartItem) -> Decimal:
        return round_money(item.gross_total())

    def total_gross(self) -> Decimal:
        return round_money(sum((item.gross_total() for item in self.cartItems), ZERO))

    def total_discount(self) -> Decimal:
        return round_money(sum((item.total_discount() for item in self.cartItems), ZERO))

    def total_net(self) -> Decimal:
        return round_money(sum((item.net_total() for item in self.cartItems), ZERO))

    def total_discounted_units(self) -> int:
        return sum(item.numberOfUnitsDiscounted for item in self.cartItems)
