"""
Discount phases and the phase evaluator.

A phase is a plain record. `evaluate_phase` never mutates it: it works on a
private copy and returns a PhaseResult with the phase total, the discount per
billing cycle and a readable derivation log.
"""

import math
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from .errors import DiscountError
from .logger import get_logger
from .money import HUNDRED, ONE, ZERO, div_round, round_money, to_float
from .time_units import TimeUnit, normalize_duration

logger = get_logger("phases")


class DiscountType(IntEnum):
    UNKNOWN = 0
    PERCENTAGE = 1
    TIME_BASED = 2  # 100% off for the phase duration
    FIXED_AMOUNT = 3

    @property
    def label(self) -> str:
        return {
            DiscountType.UNKNOWN: "Unknown",
            DiscountType.PERCENTAGE: "Percentage",
            DiscountType.TIME_BASED: "TimeBased",
            DiscountType.FIXED_AMOUNT: "FixedAmount",
        }[self]

    @classmethod
    def parse(cls, name: str) -> "DiscountType":
        for member in cls:
            if member.label == name and member is not cls.UNKNOWN:
                return member
        raise DiscountError.validation(f"invalid discount type '{name}'")


class DiscountApplication(str, Enum):
    """How a phase's discount lands on billing cycles."""

    RECURRING = "recurring"
    SPREAD = "spread"
    ONE_TIME = "one-time"
    UNKNOWN = "unknown"


def coerce_time_unit(value):
    """Accept a TimeUnit ordinal or its canonical name ("Monthly")."""
    if isinstance(value, str) and not value.isdigit():
        try:
            return TimeUnit.parse(value)
        except DiscountError as e:
            raise ValueError(e.reason)
    return value


def coerce_discount_type(value):
    """Accept a DiscountType ordinal or its name ("FixedAmount")."""
    if isinstance(value, str) and not value.isdigit():
        try:
            return DiscountType.parse(value)
        except DiscountError as e:
            raise ValueError(e.reason)
    return value


class DiscountPhase(BaseModel):
    """One segment of the subscription timeline with a single discount rule."""

    duration: int = 0
    durationUnit: TimeUnit = TimeUnit.UNKNOWN
    discountValue: Decimal = ZERO
    discountType: DiscountType = DiscountType.UNKNOWN
    application: DiscountApplication = DiscountApplication.RECURRING
    applicableNumberOfBillingCycles: int = 0
    description: str = ""

    # Written by CartItem after every evaluation
    logs: List[str] = Field(default_factory=list)
    discountsPerBillingCycle: Dict[int, float] = Field(default_factory=dict)

    @field_validator("durationUnit", mode="before")
    @classmethod
    def _parse_duration_unit(cls, value):
        return coerce_time_unit(value)

    @field_validator("discountType", mode="before")
    @classmethod
    def _parse_discount_type(cls, value):
        return coerce_discount_type(value)

    @property
    def effective_discount_value(self) -> Decimal:
        if self.discountType == DiscountType.TIME_BASED:
            return HUNDRED
        return self.discountValue


class PhaseResult(BaseModel):
    """Outcome of evaluating one phase."""

    total: Decimal
    perCycle: Dict[int, Decimal] = Field(default_factory=dict)
    log: List[str] = Field(default_factory=list)

    def rounded_per_cycle(self) -> Dict[int, float]:
        return {cycle: to_float(amount, 2) for cycle, amount in sorted(self.perCycle.items())}


# --- Validators ---

def validate_percentage_phase(phase: DiscountPhase):
    """Rules for Percentage and TimeBased phases."""
    value = phase.effective_discount_value
    if value <= 0:
        raise DiscountError.validation("discount value must be positive")
    if value > HUNDRED:
        raise DiscountError.validation("percentage discount cannot exceed 100")
    if phase.durationUnit == TimeUnit.UNKNOWN:
        raise DiscountError.validation("invalid duration unit for discount phase")
    if phase.duration <= 0:
        raise DiscountError.validation("invalid duration for discount phase")
    if phase.application == DiscountApplication.UNKNOWN:
        raise DiscountError.validation("invalid application for discount phase")


def validate_fixed_amount_phase(phase: DiscountPhase):
    """Rules for FixedAmount phases. Their length is counted in billing cycles only."""
    if phase.discountValue <= 0:
        raise DiscountError.validation("discount value must be positive")
    if phase.durationUnit != TimeUnit.UNKNOWN:
        raise DiscountError.validation("fixed amount discounts cannot set a duration unit")
    if phase.duration != 0:
        raise DiscountError.validation("fixed amount discounts cannot set a duration")
    if phase.application not in (DiscountApplication.ONE_TIME, DiscountApplication.RECURRING):
        raise DiscountError.validation("fixed amount discounts must be recurring or one-time")
    if phase.applicableNumberOfBillingCycles < 1:
        raise DiscountError.validation("fixed amount discounts must apply to at least one billing cycle")
    if phase.application == DiscountApplication.ONE_TIME and phase.applicableNumberOfBillingCycles != 1:
        raise DiscountError.validation("one-time fixed amount discounts apply to exactly one billing cycle")


def validate_phase(phase: DiscountPhase, billing_period_unit: TimeUnit):
    """All checks a cart item runs for one of its phases. Never mutates."""
    if phase.discountType == DiscountType.UNKNOWN:
        raise DiscountError.validation("unsupported discount type")

    if phase.discountType != DiscountType.FIXED_AMOUNT:
        if phase.durationUnit == TimeUnit.UNKNOWN:
            raise DiscountError.validation("invalid duration unit for discount phase")
        if phase.duration <= 0:
            raise DiscountError.validation("invalid duration for discount phase")
        if phase.durationUnit > billing_period_unit:
            raise DiscountError.validation("discount phase duration unit cannot exceed billing period unit")
        validate_percentage_phase(phase)
    else:
        validate_fixed_amount_phase(phase)


def validate_billing_cycle_span(phase: DiscountPhase, billing_period_unit: TimeUnit):
    """A recurring phase longer than one cycle must be measured in billing periods."""
    if (phase.durationUnit != billing_period_unit
            and phase.durationUnit.hours * phase.duration > billing_period_unit.hours):
        raise DiscountError.validation(
            "phase duration unit period cannot be greater than the billing period unit for recurring discounts"
        )


# --- Evaluator ---

def evaluate_phase(phase: DiscountPhase, unit_price: Decimal, billing_period_unit: TimeUnit) -> PhaseResult:
    """
    Compute one phase's discount against a subscription's unit price.

    Args:
        phase: the phase to price; left untouched
        unit_price: price of one billing cycle
        billing_period_unit: the subscription's billing period

    Returns:
        PhaseResult with the total, the per-cycle amounts (cycle 1 first) and the log

    Raises:
        DiscountError: VALIDATION for a bad phase, UNIT_CONVERSION for unusable units
    """
    if phase.discountType == DiscountType.UNKNOWN:
        raise DiscountError.validation("unsupported discount type")
    if phase.discountType != DiscountType.FIXED_AMOUNT:
        validate_percentage_phase(phase)
    else:
        # Duration and cycle count checks belong to cart validation; unit and duration are fixed up below
        if phase.discountValue <= 0:
            raise DiscountError.validation("discount value must be positive")
        if phase.application not in (DiscountApplication.ONE_TIME, DiscountApplication.RECURRING):
            raise DiscountError.validation("fixed amount discounts must be recurring or one-time")

    log: List[str] = []

    working = phase.model_copy()
    if phase.discountType == DiscountType.FIXED_AMOUNT:
        # Fixed amounts are counted in billing cycles
        working.durationUnit = billing_period_unit
        working.duration = phase.applicableNumberOfBillingCycles
    elif phase.discountType == DiscountType.TIME_BASED:
        working.discountValue = HUNDRED

    ratio = normalize_duration(working.duration, working.durationUnit, billing_period_unit)
    cycles = Decimal(phase.applicableNumberOfBillingCycles)

    log.append("Start calculation:")
    log.append(f"Unit Price: {unit_price}")
    log.append(f"Discount Type: {phase.discountType.label}")
    log.append(f"Application: {phase.application.value}")
    log.append(f"Normalized Duration Ratio: {ratio:.6f}")
    if phase.discountType == DiscountType.TIME_BASED:
        log.append("Discount value set to 100 for a time based discount")

    discounts: Dict[int, Decimal] = {}

    if phase.discountType == DiscountType.FIXED_AMOUNT:
        total = _apply_fixed_amount(working, unit_price, discounts, log)
    else:
        rate = working.discountValue / HUNDRED
        per_cycle = unit_price * rate
        discounts[1] = per_cycle
        log.append(f"Percentage Rate: {rate}")
        log.append(f"Discount per billing cycle: {per_cycle}")

        if working.application == DiscountApplication.RECURRING:
            total = _apply_recurring(working, billing_period_unit, ratio, cycles, per_cycle, rate, discounts, log)
        else:
            total = _apply_spread(ratio, cycles, per_cycle, rate, unit_price, discounts, log)

    log.append(f"Final Discount: {total}")
    logger.debug("Phase %s (%s) on %s: total=%s cycles=%s",
                 phase.description or "-", phase.discountType.label, unit_price, total, sorted(discounts))
    return PhaseResult(total=total, perCycle=discounts, log=log)


def _apply_recurring(phase, billing_period_unit, ratio, cycles, per_cycle, rate, discounts, log) -> Decimal:
    # First cycle is prorated by the ratio
    discount = per_cycle * ratio
    discounts[1] = discount
    log.append(f"Discount after proration: {discount}")
    if ratio <= ONE:
        return discount

    validate_billing_cycle_span(phase, billing_period_unit)
    if cycles < ratio:
        ratio = cycles
        log.append(f"Ratio capped at applicable billing cycles: {cycles}")
    # The rate is applied a second time here; totals depend on it
    discount = discount * ratio * rate
    for cycle in range(2, math.floor(ratio) + 1):
        discounts[cycle] = discount
    log.append(f"Discount after recurring discount: {discount}")
    return discount


def _apply_spread(ratio, cycles, per_cycle, rate, unit_price, discounts, log) -> Decimal:
    discount = per_cycle * ratio
    discounts[1] = discount
    log.append(f"Discount after spreading: {discount}")
    if ratio <= ONE:
        return discount

    remaining_cycles = ZERO
    if cycles < ratio:
        remaining_cycles = ratio - cycles
        ratio = cycles
    # Drop whatever falls beyond the applicable billing cycles
    adjustment = unit_price * rate * remaining_cycles
    discount = discount - adjustment
    discounts[1] = discount
    log.append(f"Discount adjustment for remaining cycles: {adjustment}")
    log.append(f"Discount after adjustment: {discount}")

    if unit_price < discount and cycles <= ONE:
        discount = unit_price
        discounts[1] = discount
        log.append(f"Discount capped at unit price: {discount}")
    elif unit_price < discount and cycles > ONE:
        full_cycles = int(div_round(discount, unit_price, 2))
        for cycle in range(1, full_cycles + 1):
            discounts[cycle] = unit_price
            log.append(f"Billing cycle {cycle} capped at unit price: {unit_price}")
        leftover = discount - unit_price * full_cycles
        if leftover != 0:
            discounts[full_cycles + 1] = leftover
            log.append(f"Billing cycle {full_cycles + 1} takes the remaining {round_money(leftover, 2)}")
    return discount


def _apply_fixed_amount(phase, unit_price, discounts, log) -> Decimal:
    amount = phase.discountValue
    if amount > unit_price:
        amount = unit_price
        log.append(f"Discount capped at unit price: {amount}")
    log.append(f"Fixed Amount Discount: {amount}")

    cycles = phase.applicableNumberOfBillingCycles
    total = amount * cycles
    if phase.application == DiscountApplication.RECURRING:
        for cycle in range(1, cycles + 1):
            discounts[cycle] = amount
        log.append(f"Discount after applying for recurring: {total}")
    else:
        discounts[1] = total
        log.append(f"Discount after applying one time: {total}")
    return total
