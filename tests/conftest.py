"""Shared builders for cart item tests."""

from decimal import Decimal

import pytest

from discounts import CartItem, DiscountApplication, DiscountPhase, DiscountType, SubscriptionInfo, TimeUnit


def make_phase(**overrides) -> DiscountPhase:
    fields = {
        "duration": 1,
        "durationUnit": TimeUnit.MONTHLY,
        "discountValue": Decimal("50"),
        "discountType": DiscountType.PERCENTAGE,
        "application": DiscountApplication.RECURRING,
        "applicableNumberOfBillingCycles": 1,
    }
    fields.update(overrides)
    return DiscountPhase(**fields)


def make_subscription_item(unit_price="10", billing=TimeUnit.MONTHLY, phases=None, **overrides) -> CartItem:
    subscription = SubscriptionInfo(
        isRecurring=True,
        billingPeriodUnit=billing,
        discountPhases=phases if phases is not None else [],
    )
    fields = {
        "skuId": "plan-basic",
        "quantity": 1,
        "unitPrice": Decimal(unit_price),
        "isSubscription": True,
        "subscription": subscription,
    }
    fields.update(overrides)
    return CartItem(**fields)


@pytest.fixture
def plain_item() -> CartItem:
    """Two units at $10 with $1 off one of them."""
    return CartItem(
        skuId="test1",
        quantity=2,
        unitPrice=Decimal("10.0"),
        discountDescription="Test Discount",
        discountValuePerDiscountedUnit=Decimal("1.0"),
        numberOfUnitsDiscounted=1,
    )
