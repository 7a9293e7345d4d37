"""Exact decimal helpers. Every monetary amount in the engine passes through here."""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from .config import settings
from .errors import DiscountError

Number = Union[Decimal, int, str, float]

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal. Floats go through str() so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        return parse_decimal(value)
    return Decimal(value)


def parse_decimal(text: str) -> Decimal:
    """Parse a decimal literal such as "10.00" or "-1.5"."""
    try:
        value = Decimal(text.strip())
    except (InvalidOperation, AttributeError):
        raise DiscountError.decimal_parse(f"'{text}' is not a decimal number")
    if not value.is_finite():
        raise DiscountError.decimal_parse(f"'{text}' is not a finite decimal number")
    return value


def round_money(value: Decimal, places: Optional[int] = None) -> Decimal:
    """Round to `places` fractional digits (default from settings) with the configured mode."""
    if places is None:
        places = settings.MONEY_DECIMAL_PLACES
    return value.quantize(Decimal(1).scaleb(-places), rounding=settings.rounding)


def div_round(dividend: Decimal, divisor: Decimal, places: int) -> Decimal:
    """Quotient rounded to `places` digits."""
    if divisor == 0:
        raise DiscountError.validation("division by zero")
    return round_money(dividend / divisor, places)


def to_float(value: Decimal, places: Optional[int] = None) -> float:
    """Rounded float for reporting. Lossy, never fed back into calculations."""
    return float(round_money(value, places))


def clamp_non_negative(value: Decimal) -> Decimal:
    return ZERO if value < 0 else value


def format_money(value: Decimal) -> str:
    return str(round_money(value))
