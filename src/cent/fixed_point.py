"""
fixed_point.py — Exact decimal numbers

================================================================================
REPRESENTATION
================================================================================

    value = mantissa / 10**scale        mantissa: int, scale: int >= 0

"12.50" is (1250, 2). Python ints are arbitrary precision, so there is no
overflow and no floating point anywhere: 0.1 + 0.2 == 0.3 exactly.

INVARIANTS:
1. add/subtract/multiply are exact (scales align to the max, or add)
2. divide is exact when the divisor has no prime factors other than 2 and
   5, otherwise it needs an explicit rounding mode
3. equality and hashing are by value: 1.50 == 1.5, hash(1.50) == hash(1.5),
   hash(FixedPointDecimal(5)) == hash(5)
4. a reduction of scale only happens through round()/rescale(), never
   implicitly

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from math import gcd
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from .errors import DivisionError, ErrorCode, InvalidInputError
from .parsing import parse_decimal
from .rounding import RoundingMode, apply_rounding, round_quotient
from .schemas import FixedPointModel, validate

if TYPE_CHECKING:
    from .rational import RationalNumber


def terminating_scale(denominator: int) -> Optional[int]:
    """
    Smallest k such that `denominator` divides 10**k, or None when the
    denominator has a prime factor other than 2 and 5.
    """
    denominator = abs(denominator)
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    return max(twos, fives) if denominator == 1 else None


def is_exact_divisor(numerator: int) -> bool:
    """True when dividing by numerator/denominator can never need rounding."""
    return terminating_scale(numerator) is not None


def resolve_division_mode(mode: Optional[RoundingMode], dividend: Any, divisor: Any) -> RoundingMode:
    """
    Mode for an inexact division: the argument, else the configured default.

    Raises:
        DivisionError: DIVISION_REQUIRES_ROUNDING when neither is usable
    """
    if mode is None:
        from .config import get_config
        mode = get_config().default_rounding_mode
    if mode is RoundingMode.NONE:
        raise DivisionError(
            divisor,
            f"Division of {dividend} by {divisor} is not exact and requires a rounding mode",
            code=ErrorCode.DIVISION_REQUIRES_ROUNDING,
            suggestion="Pass a RoundingMode, e.g. divide(3, RoundingMode.HALF_UP).",
        )
    return mode


@dataclass(frozen=True, slots=True, eq=False)
class FixedPointDecimal:
    """
    Exact decimal number.

    USAGE:
        price = FixedPointDecimal.parse("19.99")
        total = price * 3                          # 59.97
        share = total.divide(4)                    # 14.9925 (exact)
        third = total.divide(7, RoundingMode.HALF_UP)
    """
    mantissa: int
    scale: int = 0

    def __post_init__(self):
        if isinstance(self.mantissa, bool) or not isinstance(self.mantissa, int):
            raise InvalidInputError(
                f"Mantissa must be an int, got {type(self.mantissa).__name__}"
            )
        if isinstance(self.scale, bool) or not isinstance(self.scale, int) or self.scale < 0:
            raise InvalidInputError(
                f"Scale must be a non-negative integer, got {self.scale!r}",
                code=ErrorCode.INVALID_PRECISION,
            )

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_decimal_string(cls, text: str) -> FixedPointDecimal:
        """
        "12.50" -> FixedPointDecimal(1250, 2). Trailing zeros set the scale.

        Raises:
            ParseError: INVALID_NUMBER_FORMAT
        """
        mantissa, scale = parse_decimal(text.strip() if isinstance(text, str) else text)
        return cls(mantissa, scale)

    parse = from_decimal_string

    @classmethod
    def from_int(cls, value: int) -> FixedPointDecimal:
        return cls(value, 0)

    @classmethod
    def coerce(cls, value: Union[FixedPointDecimal, int, str]) -> FixedPointDecimal:
        """Accept a FixedPointDecimal, an int or a decimal string. Never a float."""
        if isinstance(value, FixedPointDecimal):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value, 0)
        if isinstance(value, str):
            return cls.from_decimal_string(value)
        raise InvalidInputError(
            f"Expected FixedPointDecimal, int or decimal string, got {type(value).__name__}",
            suggestion="Pass floats as strings, e.g. \"0.1\" instead of 0.1.",
        )

    @classmethod
    def from_dict(cls, data: Any) -> FixedPointDecimal:
        """{"amount": "1250", "decimals": "2"} -> 12.50"""
        model = validate(FixedPointModel, data)
        return cls(int(model.amount), int(model.decimals))

    # -------------------------------------------------------------------------
    # Rational view (duck-typed by apply_rounding)
    # -------------------------------------------------------------------------

    @property
    def numerator(self) -> int:
        return self.mantissa

    @property
    def denominator(self) -> int:
        return 10 ** self.scale

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _aligned(self, other: FixedPointDecimal) -> tuple[int, int, int]:
        scale = max(self.scale, other.scale)
        return (
            self.mantissa * 10 ** (scale - self.scale),
            other.mantissa * 10 ** (scale - other.scale),
            scale,
        )

    def add(self, other: Union[FixedPointDecimal, int, str]) -> FixedPointDecimal:
        a, b, scale = self._aligned(FixedPointDecimal.coerce(other))
        return FixedPointDecimal(a + b, scale)

    def subtract(self, other: Union[FixedPointDecimal, int, str]) -> FixedPointDecimal:
        a, b, scale = self._aligned(FixedPointDecimal.coerce(other))
        return FixedPointDecimal(a - b, scale)

    def multiply(self, other: Union[FixedPointDecimal, int, str]) -> FixedPointDecimal:
        other = FixedPointDecimal.coerce(other)
        return FixedPointDecimal(self.mantissa * other.mantissa, self.scale + other.scale)

    def divide(
        self,
        other: Union[FixedPointDecimal, int, str],
        mode: Optional[RoundingMode] = None,
        scale: Optional[int] = None,
    ) -> FixedPointDecimal:
        """
        Divide, exactly when the divisor allows it.

        A divisor whose digits have no prime factors other than 2 and 5 (2, 8,
        "0.5", "1.25") always gives a terminating quotient; it is returned at
        the smallest scale that holds it (never below this number's scale) and
        `mode` is ignored. Any other divisor needs `mode` (or the configured
        default), which rounds to `scale`, defaulting to the larger operand
        scale.

        Raises:
            DivisionError: DIVISION_BY_ZERO, or DIVISION_REQUIRES_ROUNDING for
                a divisor with other prime factors and no usable mode
        """
        divisor = FixedPointDecimal.coerce(other)
        if divisor.mantissa == 0:
            raise DivisionError(divisor, f"Cannot divide {self} by zero")

        p = self.mantissa * 10 ** divisor.scale
        q = divisor.mantissa * 10 ** self.scale
        if q < 0:
            p, q = -p, -q
        g = gcd(p, q)
        p, q = p // g, q // g

        if is_exact_divisor(divisor.mantissa):
            target = max(terminating_scale(q), self.scale)
            return FixedPointDecimal(p * 10 ** target // q, target)

        mode = resolve_division_mode(mode, self, divisor)
        target = max(self.scale, divisor.scale) if scale is None else scale
        if target < 0:
            raise InvalidInputError(
                f"Scale must be non-negative, got {target}", code=ErrorCode.INVALID_PRECISION
            )
        return FixedPointDecimal(round_quotient(p * 10 ** target, q, mode), target)

    def negate(self) -> FixedPointDecimal:
        return FixedPointDecimal(-self.mantissa, self.scale)

    def absolute(self) -> FixedPointDecimal:
        return FixedPointDecimal(abs(self.mantissa), self.scale)

    # -------------------------------------------------------------------------
    # Scale
    # -------------------------------------------------------------------------

    def round(self, scale: int, mode: RoundingMode) -> FixedPointDecimal:
        """
        Round to `scale` decimals. Increasing the scale pads zeros (lossless).

        Raises:
            InvalidInputError: negative scale
            PrecisionLossError: mode NONE with a non-zero discarded part
        """
        return apply_rounding(self, mode, scale)

    def rescale(self, scale: int) -> FixedPointDecimal:
        """Lossless re-scaling; PrecisionLossError if digits would be dropped."""
        return apply_rounding(self, RoundingMode.NONE, scale)

    def normalized(self) -> FixedPointDecimal:
        """Strip trailing fractional zeros: 1.2500 -> 1.25, 3.00 -> 3."""
        mantissa, scale = self.mantissa, self.scale
        while scale > 0 and mantissa % 10 == 0:
            mantissa //= 10
            scale -= 1
        return FixedPointDecimal(mantissa, scale)

    # -------------------------------------------------------------------------
    # Predicates / comparison
    # -------------------------------------------------------------------------

    def is_zero(self) -> bool:
        return self.mantissa == 0

    def is_positive(self) -> bool:
        return self.mantissa > 0

    def is_negative(self) -> bool:
        return self.mantissa < 0

    def is_integer(self) -> bool:
        return self.mantissa % 10 ** self.scale == 0

    def compare(self, other: Union[FixedPointDecimal, int, str]) -> int:
        """-1, 0 or 1."""
        a, b, _ = self._aligned(FixedPointDecimal.coerce(other))
        return (a > b) - (a < b)

    def _comparable(self, other: Any) -> Optional[FixedPointDecimal]:
        if isinstance(other, FixedPointDecimal):
            return other
        if isinstance(other, int) and not isinstance(other, bool):
            return FixedPointDecimal(other, 0)
        return None

    def __eq__(self, other: Any) -> bool:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.compare(other) == 0

    def __hash__(self) -> int:
        # same as the equal RationalNumber or int
        q = 10 ** self.scale
        g = gcd(self.mantissa, q)
        if g == q:
            return hash(self.mantissa // g)
        return hash((self.mantissa // g, q // g))

    def __lt__(self, other: Any) -> bool:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: Any) -> bool:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: Any) -> bool:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: Any) -> bool:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.compare(other) >= 0

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other: Any) -> FixedPointDecimal:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.add(other)

    __radd__ = __add__

    def __sub__(self, other: Any) -> FixedPointDecimal:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other: Any) -> FixedPointDecimal:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return other.subtract(self)

    def __mul__(self, other: Any) -> FixedPointDecimal:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.multiply(other)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> FixedPointDecimal:
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.divide(other)

    def __neg__(self) -> FixedPointDecimal:
        return self.negate()

    def __abs__(self) -> FixedPointDecimal:
        return self.absolute()

    def __bool__(self) -> bool:
        return self.mantissa != 0

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_rational(self) -> "RationalNumber":
        from .rational import RationalNumber
        return RationalNumber(self.mantissa, 10 ** self.scale)

    def to_decimal_string(self) -> str:
        """Exact rendering; trailing zeros are kept as the scale dictates."""
        digits = str(abs(self.mantissa)).rjust(self.scale + 1, "0")
        sign = "-" if self.mantissa < 0 else ""
        if self.scale == 0:
            return sign + digits
        return f"{sign}{digits[:-self.scale]}.{digits[-self.scale:]}"

    def to_dict(self) -> dict[str, str]:
        """Wire format: numeric fields as strings, never JSON numbers."""
        return {"amount": str(self.mantissa), "decimals": str(self.scale)}

    def __str__(self) -> str:
        return self.to_decimal_string()

    def __repr__(self) -> str:
        return f"FixedPointDecimal('{self.to_decimal_string()}')"


def as_fixed_point(value: Union[FixedPointDecimal, int, str, Mapping[str, str]]) -> FixedPointDecimal:
    """Like FixedPointDecimal.coerce(), additionally accepting the wire dict."""
    if isinstance(value, Mapping):
        return FixedPointDecimal.from_dict(value)
    return FixedPointDecimal.coerce(value)
