"""
Cart line items.

Totals are computed on demand: setters only check their own argument, and any
inconsistency in the item surfaces from total_discount() / net_total().
"""

from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field, field_validator

from .errors import DiscountError
from .logger import get_logger
from .money import HUNDRED, ZERO, clamp_non_negative, parse_decimal
from .phases import (
    DiscountPhase,
    DiscountType,
    PhaseResult,
    coerce_discount_type,
    coerce_time_unit,
    evaluate_phase,
    validate_phase,
)
from .time_units import TimeUnit, normalize_duration

logger = get_logger("cart_item")


class SubscriptionInfo(BaseModel):
    """Billing schedule of a subscription item."""
    isRecurring: bool = False
    billingPeriodUnit: TimeUnit = TimeUnit.UNKNOWN
    trialPeriod: int = 0  # counted in trialPeriodUnit, 0 for no trial
    trialPeriodUnit: TimeUnit = TimeUnit.NO_BILLING
    discountPhases: List[DiscountPhase] = Field(default_factory=list)

    @field_validator("billingPeriodUnit", "trialPeriodUnit", mode="before")
    @classmethod
    def _parse_unit(cls, value):
        return coerce_time_unit(value)


class CartItem(BaseModel):
    skuId: str = ""
    quantity: int = 0
    unitPrice: Decimal = ZERO
    discountDescription: str = ""

    # Discount for non-subscription items
    discountValuePerDiscountedUnit: Decimal = ZERO
    numberOfUnitsDiscounted: int = 0
    discountType: DiscountType = DiscountType.UNKNOWN  # Percentage, anything else is a fixed amount per unit

    isSubscription: bool = False
    subscription: SubscriptionInfo = Field(default_factory=SubscriptionInfo)

    @field_validator("discountType", mode="before")
    @classmethod
    def _parse_discount_type(cls, value):
        return coerce_discount_type(value)

    def clone(self) -> "CartItem":
        """Independent copy; phase outputs are not shared with the original."""
        return self.model_copy(deep=True)

    # --- Setters ---

    def set_sku_id(self, sku_id: str):
        if not sku_id:
            raise DiscountError.validation("skuID cannot be empty")
        self.skuId = sku_id

    def set_discount_description(self, description: str):
        self.discountDescription = description

    def set_quantity(self, quantity: int):
        if quantity < 0:
            raise DiscountError.validation("quantity cannot be negative")
        if self.isSubscription and quantity > 1:
            raise DiscountError.validation("quantity cannot exceed 1 for recurring subscriptions")
        self.quantity = quantity

    def increment_quantity(self, quantity: int) -> int:
        if quantity < 0:
            raise DiscountError.validation("quantity cannot be negative")
        self.set_quantity(self.quantity + quantity)
        return self.quantity

    def decrement_quantity(self, quantity: int) -> int:
        if quantity < 0 or self.quantity - quantity < 0:
            raise DiscountError.validation("quantity cannot be less than 0")
        self.quantity -= quantity
        return self.quantity

    def set_unit_price(self, unit_price: Decimal):
        if unit_price < 0:
            raise DiscountError.validation("unit price cannot be negative")
        self.unitPrice = unit_price

    def set_unit_price_from_string(self, unit_price: str):
        self.set_unit_price(parse_decimal(unit_price))

    def set_discount_amount_per_unit(self, discount_amount: Decimal):
        if discount_amount < 0:
            raise DiscountError.validation("discount amount cannot be negative")
        self.discountValuePerDiscountedUnit = discount_amount

    def set_discount_amount_per_unit_from_string(self, discount_amount: str):
        self.set_discount_amount_per_unit(parse_decimal(discount_amount))

    def set_discounted_unit_quantity(self, units: int):
        if units < 0:
            raise DiscountError.validation("discounted units quantity cannot be negative")
        self.numberOfUnitsDiscounted = units

    # --- Validation ---

    def validate_item(self):
        """Raise a VALIDATION DiscountError for the first broken invariant. Never mutates."""
        if self.quantity < 0:
            raise DiscountError.validation("quantity cannot be negative")
        if self.unitPrice < 0:
            raise DiscountError.validation("unit price cannot be negative")
        if self.discountValuePerDiscountedUnit < 0:
            raise DiscountError.validation("discount amount per unit cannot be negative")
        if self.numberOfUnitsDiscounted < 0:
            raise DiscountError.validation("discounted units quantity cannot be negative")
        if self.numberOfUnitsDiscounted > self.quantity:
            raise DiscountError.validation("discounted units quantity cannot exceed total quantity")

        if not self.isSubscription:
            return
        billing_unit = self.subscription.billingPeriodUnit
        if billing_unit == TimeUnit.UNKNOWN:
            raise DiscountError.validation("invalid billing period unit")
        if self.quantity > 1:
            raise DiscountError.validation("quantity cannot exceed 1 for recurring subscriptions")
        for phase in self.subscription.discountPhases:
            validate_phase(phase, billing_unit)

    # --- Totals ---

    def gross_total(self) -> Decimal:
        return clamp_non_negative(self.unitPrice * self.quantity)

    def total_discount(self) -> Decimal:
        try:
            self.validate_item()
        except DiscountError as e:
            logger.warning("Cart item '%s' rejected: %s", self.skuId, e)
            raise
        if self.isSubscription:
            return self._subscription_discount()
        return self._non_subscription_discount()

    def net_total(self) -> Decimal:
        return self.gross_total() - self.total_discount()

    def evaluate_phases(self) -> List[PhaseResult]:
        """
        Price every phase in order and record each outcome on its phase.

        Stops at the first failing phase; phases already evaluated keep their
        new logs and per-cycle amounts.
        """
        phases = self.subscription.discountPhases
        if not phases:
            raise DiscountError.validation(
                "no discount phases found; discount phases are required for recurring subscriptions"
            )

        results = []
        for phase in phases:
            result = evaluate_phase(phase, self.unitPrice, self.subscription.billingPeriodUnit)
            phase.logs = list(result.log)
            phase.discountsPerBillingCycle = result.rounded_per_cycle()
            results.append(result)
        return results

    def _subscription_discount(self) -> Decimal:
        return sum((result.total for result in self.evaluate_phases()), ZERO)

    def _non_subscription_discount(self) -> Decimal:
        units = self.numberOfUnitsDiscounted
        value = self.discountValuePerDiscountedUnit
        if units == 0 or value == 0:
            return ZERO

        if self.discountType == DiscountType.PERCENTAGE:
            discount = self.unitPrice * (value / HUNDRED) * units
        else:
            discount = value * units

        return min(discount, self.gross_total())

    def trial_discount(self) -> Decimal:
        """Value of the trial period. Reported on its own, never part of total_discount()."""
        subscription = self.subscription
        if subscription.trialPeriod == 0:
            return ZERO
        ratio = normalize_duration(subscription.trialPeriod, subscription.trialPeriodUnit,
                                   subscription.billingPeriodUnit)
        return self.unitPrice * ratio
