"""
rounding.py — Rounding strategies on exact remainders

Every rounding decision in cent goes through round_quotient(): an integer
division whose remainder is inspected exactly. No floating-point midpoint test
is ever performed, so the table below holds bit for bit:

    Mode        Rule
    ----------  ------------------------------------------------------------
    UP          away from zero on any nonzero remainder
    DOWN        toward zero (truncate)
    CEILING     toward +infinity
    FLOOR       toward -infinity
    HALF_UP     nearest, ties away from zero
    HALF_DOWN   nearest, ties toward zero
    HALF_EVEN   nearest, ties to the even retained digit (banker's rounding)
    NONE        rounding disallowed: any information loss raises
"""

from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Union

from .errors import DivisionError, PrecisionLossError

if TYPE_CHECKING:
    from .fixed_point import FixedPointDecimal
    from .rational import RationalNumber


class RoundingMode(Enum):
    """
    Rounding strategies.

    The choice has real consequences: HALF_UP is the usual commercial rule,
    HALF_EVEN minimizes statistical bias over many operations, and
    regulations often mandate one of them explicitly.
    """
    UP = "up"
    DOWN = "down"
    CEILING = "ceiling"
    FLOOR = "floor"
    HALF_UP = "half_up"
    HALF_DOWN = "half_down"
    HALF_EVEN = "half_even"
    NONE = "none"


def _strict_precision() -> bool:
    from .config import get_config
    return get_config().strict_precision


def round_quotient(numerator: int, denominator: int, mode: RoundingMode) -> int:
    """
    Divide two integers and round the quotient according to `mode`.

    The remainder is kept as an exact integer; ties are detected by comparing
    2 * remainder with the divisor.

    Raises:
        DivisionError: if denominator is zero
        PrecisionLossError: if the division is inexact and mode is NONE, or
            strict precision is configured
    """
    if denominator == 0:
        raise DivisionError(denominator, "Cannot divide by zero")

    negative = (numerator < 0) != (denominator < 0)
    divisor = abs(denominator)
    quotient, remainder = divmod(abs(numerator), divisor)

    if remainder == 0:
        return -quotient if negative else quotient

    if mode is RoundingMode.NONE:
        raise PrecisionLossError(
            f"{numerator}/{denominator} is not exact and rounding mode is NONE",
            value=(numerator, denominator),
            suggestion="Pass an explicit RoundingMode.",
        )
    if _strict_precision():
        raise PrecisionLossError(
            f"{numerator}/{denominator} would be rounded ({mode.name}) "
            f"but strict precision is enabled",
            value=(numerator, denominator),
        )

    # quotient is the magnitude truncated toward zero; decide whether to step
    # one unit away from zero.
    twice = remainder * 2
    if mode is RoundingMode.UP:
        away = True
    elif mode is RoundingMode.DOWN:
        away = False
    elif mode is RoundingMode.CEILING:
        away = not negative
    elif mode is RoundingMode.FLOOR:
        away = negative
    elif mode is RoundingMode.HALF_UP:
        away = twice >= divisor
    elif mode is RoundingMode.HALF_DOWN:
        away = twice > divisor
    elif mode is RoundingMode.HALF_EVEN:
        away = twice > divisor or (twice == divisor and quotient % 2 == 1)
    else:
        raise ValueError(f"Unknown rounding mode: {mode}")

    if away:
        quotient += 1
    return -quotient if negative else quotient


def apply_rounding(
    value: Union["FixedPointDecimal", "RationalNumber"],
    mode: RoundingMode,
    target_scale: int,
) -> "FixedPointDecimal":
    """
    Round a FixedPointDecimal or RationalNumber to `target_scale` decimals.

    Increasing the scale is lossless; decreasing it is governed by `mode`.

    Example:
        apply_rounding(FixedPointDecimal.parse("2.345"), RoundingMode.HALF_EVEN, 2)
        # -> 2.34
    """
    from .errors import ErrorCode, InvalidInputError
    from .fixed_point import FixedPointDecimal

    if not isinstance(target_scale, int) or target_scale < 0:
        raise InvalidInputError(
            f"Decimal places must be a non-negative integer, got {target_scale}",
            code=ErrorCode.INVALID_PRECISION,
        )

    numerator = value.numerator * 10 ** target_scale
    denominator = value.denominator
    if mode is RoundingMode.NONE and numerator % denominator != 0:
        raise PrecisionLossError(
            f"Rounding {value} to {target_scale} decimal places would lose precision",
            value=value,
            suggestion="Pass an explicit RoundingMode or keep a larger scale.",
        )
    return FixedPointDecimal(round_quotient(numerator, denominator, mode), target_scale)
