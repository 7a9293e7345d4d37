"""
Unit tests for the decimal helpers and typed errors.
"""

from decimal import ROUND_HALF_EVEN, Decimal

import pytest

from discounts import money
from discounts.config import Settings, settings
from discounts.errors import DiscountError, ErrorKind
from discounts.logger import get_logger


class TestParseDecimal:
    def test_valid_literals(self):
        assert money.parse_decimal("10.00") == Decimal("10.00")
        assert money.parse_decimal("-1.5") == Decimal("-1.5")
        assert money.parse_decimal(" 3 ") == Decimal("3")

    @pytest.mark.parametrize("text", ["", "ten", "1.2.3", "NaN", "Infinity"])
    def test_invalid_literals(self, text):
        with pytest.raises(DiscountError) as exc_info:
            money.parse_decimal(text)
        assert exc_info.value.kind == ErrorKind.DECIMAL_PARSE


class TestRounding:
    """Half away from zero at two places unless configured otherwise."""

    @pytest.mark.parametrize("value, expected", [
        ("0.125", "0.13"),
        ("0.135", "0.14"),
        ("-0.125", "-0.13"),
        ("10.666666", "10.67"),
        ("5", "5.00"),
    ])
    def test_round_money(self, value, expected):
        assert str(money.round_money(Decimal(value))) == expected

    def test_explicit_places(self):
        assert money.round_money(Decimal("1.23456"), 4) == Decimal("1.2346")

    def test_bankers_rounding_when_configured(self, monkeypatch):
        monkeypatch.setattr(settings, "MONEY_ROUNDING", "half_even")
        assert settings.rounding == ROUND_HALF_EVEN
        assert money.round_money(Decimal("0.125")) == Decimal("0.12")

    def test_div_round(self):
        assert money.div_round(Decimal("10.67"), Decimal("10"), 2) == Decimal("1.07")
        with pytest.raises(DiscountError):
            money.div_round(Decimal("1"), Decimal("0"), 2)

    def test_to_float_is_rounded(self):
        assert money.to_float(Decimal("0.6666")) == 0.67

    def test_repeated_rounding_is_stable(self):
        value = Decimal("10") * Decimal("768") / Decimal("720")
        assert {money.round_money(value) for _ in range(5)} == {Decimal("10.67")}


class TestHelpers:
    def test_to_decimal(self):
        assert money.to_decimal(0.1) == Decimal("0.1")
        assert money.to_decimal(3) == Decimal("3")
        assert money.to_decimal("2.50") == Decimal("2.50")

    def test_clamp_non_negative(self):
        assert money.clamp_non_negative(Decimal("-0.01")) == 0
        assert money.clamp_non_negative(Decimal("4")) == Decimal("4")

    def test_format_money(self):
        assert money.format_money(Decimal("3.5")) == "3.50"


class TestErrors:
    """Kinds, messages and equality."""

    def test_message_includes_kind(self):
        assert str(DiscountError.validation("bad phase")) == "validation error: bad phase"
        assert str(DiscountError.date("start after end")) == "date error: start after end"
        assert str(DiscountError.limit("usage limit exceeded")) == "limit error: usage limit exceeded"

    def test_equality_by_kind_and_reason(self):
        assert DiscountError.validation("x") == DiscountError.validation("x")
        assert DiscountError.validation("x") != DiscountError.limit("x")
        assert DiscountError.validation("x") != DiscountError.validation("y")

    def test_detail_payload(self):
        detail = DiscountError.unit_conversion("no hours").to_detail()
        assert detail == {"kind": "UNIT_CONVERSION", "reason": "no hours",
                          "message": "unit conversion error: no hours"}


class TestSettings:
    def test_defaults(self):
        summary = Settings().get_config_summary()
        assert summary["money_decimal_places"] == 2
        assert summary["money_rounding"] in ("half_up", "half_even")


class TestLogger:
    def test_child_loggers_hang_off_the_package_logger(self):
        assert get_logger("phases").name == "discounts.phases"
        assert get_logger().name == "discounts"
        assert get_logger().propagate is False
        assert len(get_logger().handlers) == 1
