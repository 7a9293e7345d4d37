"""Package logger for the discount engine. Level comes from LOG_LEVEL."""
import logging
import sys

from .config import settings, validate_config

logger = logging.getLogger("discounts")
logger.setLevel(settings.LOG_LEVEL)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(handler)

# Quotes are logged once, by the package handler
logger.propagate = False

for problem in validate_config():
    logger.warning("Configuration warning: %s", problem)


def get_logger(name: str = None) -> logging.Logger:
    """Child logger such as 'discounts.phases'; the package logger when no name is given."""
    return logging.getLogger(f"discounts.{name}") if name else logger
