"""
Typed errors raised by the discount engine.

Every failure is a DiscountError tagged with an ErrorKind, so callers branch on
`err.kind` instead of on exception subclasses.
"""

from enum import Enum
from typing import Any, Dict


class ErrorKind(Enum):
    """Closed set of failure kinds."""

    VALIDATION = "validation"
    # Raised by the campaign component that wraps the engine
    DATE = "date"
    LIMIT = "limit"

    DECIMAL_PARSE = "decimal parse"
    UNIT_CONVERSION = "unit conversion"
    NOT_FOUND = "not found"


class DiscountError(Exception):
    """An engine failure: a kind plus a human-readable reason."""

    def __init__(self, kind: ErrorKind, reason: str):
        super().__init__(reason)
        self.kind = kind
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.kind.value} error: {self.reason}"

    def __repr__(self) -> str:
        return f"DiscountError({self.kind.name}, {self.reason!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiscountError):
            return NotImplemented
        return self.kind == other.kind and self.reason == other.reason

    def __hash__(self) -> int:
        return hash((self.kind, self.reason))

    def to_detail(self) -> Dict[str, Any]:
        """Payload used for HTTP error responses."""
        return {"kind": self.kind.name, "reason": self.reason, "message": str(self)}

    @classmethod
    def validation(cls, reason: str) -> "DiscountError":
        return cls(ErrorKind.VALIDATION, reason)

    @classmethod
    def date(cls, reason: str) -> "DiscountError":
        return cls(ErrorKind.DATE, reason)

    @classmethod
    def limit(cls, reason: str) -> "DiscountError":
        return cls(ErrorKind.LIMIT, reason)

    @classmethod
    def decimal_parse(cls, reason: str) -> "DiscountError":
        return cls(ErrorKind.DECIMAL_PARSE, reason)

    @classmethod
    def unit_conversion(cls, reason: str) -> "DiscountError":
        return cls(ErrorKind.UNIT_CONVERSION, reason)

    @classmethod
    def not_found(cls, reason: str) -> "DiscountError":
        return cls(ErrorKind.NOT_FOUND, reason)
