"""
Settings for the discount engine.

Values come from the environment (optionally a .env file at the project root).
"""

import os
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Money display: fractional digits and rounding mode for reported amounts
MONEY_DECIMAL_PLACES = int(os.getenv("MONEY_DECIMAL_PLACES", "2"))
MONEY_ROUNDING = os.getenv("MONEY_ROUNDING", "half_up").lower()

APP_NAME = os.getenv("APP_NAME", "Subscription Discount API")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
APP_DESCRIPTION = "Quotes subscription and cart discounts with exact decimal arithmetic."

ROUNDING_MODES = {
    "half_up": ROUND_HALF_UP,  # half away from zero
    "half_even": ROUND_HALF_EVEN,  # banker's rounding
}


def validate_config():
    """Return a list of configuration problems (empty when all good)."""
    errors = []
    if MONEY_ROUNDING not in ROUNDING_MODES:
        errors.append(f"MONEY_ROUNDING must be one of {sorted(ROUNDING_MODES)}, got '{MONEY_ROUNDING}'")
    if MONEY_DECIMAL_PLACES < 0:
        errors.append("MONEY_DECIMAL_PLACES cannot be negative")
    return errors


class Settings:
    """Read-only view over the module settings."""

    def __init__(self):
        self.LOG_LEVEL = LOG_LEVEL
        self.MONEY_DECIMAL_PLACES = max(MONEY_DECIMAL_PLACES, 0)
        self.MONEY_ROUNDING = MONEY_ROUNDING if MONEY_ROUNDING in ROUNDING_MODES else "half_up"
        self.APP_NAME = APP_NAME
        self.APP_VERSION = APP_VERSION
        self.APP_DESCRIPTION = APP_DESCRIPTION

    @property
    def rounding(self) -> str:
        """The decimal module rounding constant for MONEY_ROUNDING."""
        return ROUNDING_MODES[self.MONEY_ROUNDING]

    def get_config_summary(self):
        return {
            "app_name": self.APP_NAME,
            "app_version": self.APP_VERSION,
            "log_level": self.LOG_LEVEL,
            "money_decimal_places": self.MONEY_DECIMAL_PLACES,
            "money_rounding": self.MONEY_ROUNDING,
        }


settings = Settings()
