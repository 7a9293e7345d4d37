"""
Billing and duration units.

Months are normalized to 30 days and years to 365, so Monthly and ThirtyDays
carry the same hour count while staying distinct tags.
"""

from decimal import Decimal
from enum import IntEnum
from typing import Dict

from .errors import DiscountError


class TimeUnit(IntEnum):
    """Time units, ordered from finest to coarsest. Serialized by ordinal."""

    UNKNOWN = 0
    HOURLY = 1
    DAILY = 2
    WEEKLY = 3
    BI_WEEKLY = 4
    THIRTY_DAYS = 5
    MONTHLY = 6
    QUARTERLY = 7
    BI_ANNUAL = 8
    ANNUAL = 9
    BIENNIAL = 10
    NO_BILLING = 11

    @property
    def hours(self) -> int:
        return _HOURS[self]

    @property
    def label(self) -> str:
        """Canonical name, e.g. "BiWeekly"."""
        return _LABELS[self]

    def is_valid(self) -> bool:
        return self is not TimeUnit.UNKNOWN

    @classmethod
    def parse(cls, name: str) -> "TimeUnit":
        """Look a unit up by its canonical name."""
        unit = _BY_LABEL.get(name)
        if unit is None:
            raise DiscountError.unit_conversion(f"invalid time unit '{name}'")
        return unit

    def __str__(self) -> str:
        return self.label


_HOURS: Dict[TimeUnit, int] = {
    TimeUnit.UNKNOWN: 0,
    TimeUnit.HOURLY: 1,
    TimeUnit.DAILY: 24,
    TimeUnit.WEEKLY: 24 * 7,
    TimeUnit.BI_WEEKLY: 24 * 14,
    TimeUnit.THIRTY_DAYS: 24 * 30,
    TimeUnit.MONTHLY: 24 * 30,
    TimeUnit.QUARTERLY: 24 * 90,
    TimeUnit.BI_ANNUAL: 24 * 365 // 2,
    TimeUnit.ANNUAL: 24 * 365,
    TimeUnit.BIENNIAL: 24 * 730,
    TimeUnit.NO_BILLING: 0,
}

_LABELS: Dict[TimeUnit, str] = {
    TimeUnit.UNKNOWN: "Unknown",
    TimeUnit.HOURLY: "Hourly",
    TimeUnit.DAILY: "Daily",
    TimeUnit.WEEKLY: "Weekly",
    TimeUnit.BI_WEEKLY: "BiWeekly",
    TimeUnit.THIRTY_DAYS: "ThirtyDays",
    TimeUnit.MONTHLY: "Monthly",
    TimeUnit.QUARTERLY: "Quarterly",
    TimeUnit.BI_ANNUAL: "BiAnnual",
    TimeUnit.ANNUAL: "Annual",
    TimeUnit.BIENNIAL: "Biennial",
    TimeUnit.NO_BILLING: "NoBilling",
}

# Unknown is never parseable
_BY_LABEL: Dict[str, TimeUnit] = {label: unit for unit, label in _LABELS.items() if unit.is_valid()}


def normalize_duration(length: int, from_unit: TimeUnit, to_unit: TimeUnit) -> Decimal:
    """
    Express `length` x `from_unit` as a count of `to_unit` periods.

    The ratio is below 1 when the duration covers part of one period and above
    1 when it spans several.
    """
    if not from_unit.is_valid() or not to_unit.is_valid():
        raise DiscountError.unit_conversion(
            f"cannot convert {length} {from_unit.label} to {to_unit.label}: unknown time unit"
        )
    if to_unit.hours == 0:
        raise DiscountError.unit_conversion(
            f"cannot convert {length} {from_unit.label} to {to_unit.label}: target unit has no duration"
        )
    return Decimal(length * from_unit.hours) / Decimal(to_unit.hours)
