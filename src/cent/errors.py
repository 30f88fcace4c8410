"""
errors.py — Error taxonomy for cent

================================================================================
DESIGN
================================================================================

Every failure raised by the library is a CentError carrying:

- code:        machine-readable ErrorCode
- suggestion:  actionable guidance for the caller (optional)
- example:     short snippet showing correct usage (optional)

Each concrete error also mixes in the closest builtin exception, so callers
that only know Python's taxonomy keep working:

    ParseError            -> ValueError
    CurrencyMismatchError -> TypeError
    DivisionError         -> ArithmeticError
    PrecisionLossError    -> ArithmeticError
    InvalidInputError     -> ValueError
    ValidationError       -> ValueError
    ExchangeRateError     -> ValueError

Errors are raised at the point of detection and name the offending operands,
so the caller never has to re-derive the context.

================================================================================
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Machine-readable identifiers for every failure kind."""

    # Parsing
    PARSE_ERROR = "PARSE_ERROR"
    INVALID_NUMBER_FORMAT = "INVALID_NUMBER_FORMAT"
    INVALID_MONEY_STRING = "INVALID_MONEY_STRING"
    UNKNOWN_CURRENCY = "UNKNOWN_CURRENCY"

    # Currency
    CURRENCY_MISMATCH = "CURRENCY_MISMATCH"

    # Division
    DIVISION_BY_ZERO = "DIVISION_BY_ZERO"
    DIVISION_REQUIRES_ROUNDING = "DIVISION_REQUIRES_ROUNDING"
    INVALID_DIVISOR = "INVALID_DIVISOR"

    # Precision
    PRECISION_LOSS = "PRECISION_LOSS"
    INVALID_PRECISION = "INVALID_PRECISION"

    # Input
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_RATIO = "INVALID_RATIO"
    INVALID_JSON = "INVALID_JSON"
    EMPTY_ARRAY = "EMPTY_ARRAY"

    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Exchange rates
    INVALID_EXCHANGE_RATE = "INVALID_EXCHANGE_RATE"
    EXCHANGE_RATE_MISMATCH = "EXCHANGE_RATE_MISMATCH"


class CentError(Exception):
    """Base class for all cent errors."""

    default_code: ErrorCode = ErrorCode.PARSE_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: Optional[ErrorCode] = None,
        suggestion: Optional[str] = None,
        example: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.suggestion = suggestion
        self.example = example

    def detailed(self) -> str:
        """Message plus suggestion and example, for logs and CLIs."""
        result = f"{type(self).__name__} [{self.code.value}]: {self.message}"
        if self.suggestion:
            result += f"\n\nSuggestion: {self.suggestion}"
        if self.example:
            result += f"\n\nExample:\n{self.example}"
        return result


class ParseError(CentError, ValueError):
    """Malformed decimal, fraction, percentage or money string."""

    default_code = ErrorCode.PARSE_ERROR

    def __init__(self, input: str, message: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.input = input


class CurrencyMismatchError(CentError, TypeError):
    """Binary operation between Money values of different currencies."""

    default_code = ErrorCode.CURRENCY_MISMATCH

    def __init__(self, expected: str, actual: str, operation: str, **kwargs: Any):
        kwargs.setdefault(
            "suggestion",
            f"Convert one amount to {expected} or {actual} before performing the operation.",
        )
        super().__init__(
            f"Cannot {operation} Money with different currencies: "
            f"expected {expected}, got {actual}",
            **kwargs,
        )
        self.expected = expected
        self.actual = actual
        self.operation = operation


class DivisionError(CentError, ArithmeticError):
    """Division by zero, by a non-finite value, or inexact without a mode."""

    default_code = ErrorCode.DIVISION_BY_ZERO

    def __init__(self, divisor: Any, message: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.divisor = divisor


class PrecisionLossError(CentError, ArithmeticError):
    """An operation would discard significant digits and that is forbidden."""

    default_code = ErrorCode.PRECISION_LOSS

    def __init__(self, message: str, *, value: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.value = value


class InvalidInputError(CentError, ValueError):
    """Argument outside the accepted domain (negative scale, bad ratios, ...)."""

    default_code = ErrorCode.INVALID_INPUT


class EmptyArrayError(InvalidInputError):
    """Aggregation over zero elements with no default supplied."""

    default_code = ErrorCode.EMPTY_ARRAY

    def __init__(self, operation: str, **kwargs: Any):
        kwargs.setdefault(
            "suggestion",
            f"Pass a non-empty sequence or a default value to Money.{operation}().",
        )
        super().__init__(
            f"Cannot compute {operation} of an empty sequence",
            **kwargs,
        )
        self.operation = operation


class ValidationError(CentError, ValueError):
    """Structured interchange data failed its schema checks."""

    default_code = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        *,
        issues: Optional[list[dict[str, str]]] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.issues = issues or []


class ExchangeRateError(CentError, ValueError):
    """Invalid exchange rate or conversion with an unrelated currency."""

    default_code = ErrorCode.INVALID_EXCHANGE_RATE
