"""
rational.py — Exact fractions

RationalNumber keeps p/q in lowest terms with a positive denominator, so
equal values always have identical fields. It is the working type for
computations that do not terminate in base 10 (1/3, exchange-rate inverses,
allocation ratios); results go back to FixedPointDecimal only through an
explicit rounding step.
"""

from __future__ import annotations
from dataclasses import dataclass
from math import gcd
from typing import Any, Optional, Union

from .errors import DivisionError, ErrorCode, InvalidInputError, PrecisionLossError
from .fixed_point import FixedPointDecimal, terminating_scale
from .parsing import is_fraction_string, parse_decimal, parse_fraction
from .rounding import RoundingMode, apply_rounding
from .schemas import RationalModel, validate

RationalLike = Union["RationalNumber", FixedPointDecimal, int, str]


@dataclass(frozen=True, slots=True, eq=False)
class RationalNumber:
    """
    Exact fraction p/q.

    USAGE:
        third = RationalNumber(1, 3)
        RationalNumber.parse("1234/97328")        # 617/48664
        (third * 3).to_fixed_point()              # 1
        third.to_fixed_point(4, RoundingMode.HALF_UP)   # 0.3333
    """
    numerator: int
    denominator: int = 1

    def __post_init__(self):
        p, q = self.numerator, self.denominator
        for name, v in (("numerator", p), ("denominator", q)):
            if isinstance(v, bool) or not isinstance(v, int):
                raise InvalidInputError(f"Rational {name} must be an int, got {type(v).__name__}")
        if q == 0:
            raise DivisionError(q, f"Rational denominator cannot be zero ({p}/0)")
        if q < 0:
            p, q = -p, -q
        g = gcd(p, q)
        object.__setattr__(self, "numerator", p // g)
        object.__setattr__(self, "denominator", q // g)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_fraction_string(cls, text: str) -> RationalNumber:
        """
        Raises:
            ParseError: non-integer parts, extra separators or zero denominator
        """
        p, q = parse_fraction(text)
        return cls(p, q)

    @classmethod
    def from_decimal_string(cls, text: str) -> RationalNumber:
        """"0.125" -> 1/8"""
        mantissa, scale = parse_decimal(text.strip())
        return cls(mantissa, 10 ** scale)

    @classmethod
    def parse(cls, text: str) -> RationalNumber:
        """Fraction ("3/4") or decimal ("0.75") string."""
        if is_fraction_string(text):
            return cls.from_fraction_string(text)
        return cls.from_decimal_string(text)

    @classmethod
    def coerce(cls, value: RationalLike) -> RationalNumber:
        if isinstance(value, RationalNumber):
            return value
        if isinstance(value, FixedPointDecimal):
            return cls(value.mantissa, 10 ** value.scale)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value, 1)
        if isinstance(value, str):
            return cls.parse(value)
        raise InvalidInputError(
            f"Expected RationalNumber, FixedPointDecimal, int or string, got {type(value).__name__}"
        )

    @classmethod
    def from_dict(cls, data: Any) -> RationalNumber:
        """{"p": "1", "q": "3"} -> 1/3"""
        model = validate(RationalModel, data)
        return cls(int(model.p), int(model.q))

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: RationalLike) -> RationalNumber:
        o = RationalNumber.coerce(other)
        return RationalNumber(
            self.numerator * o.denominator + o.numerator * self.denominator,
            self.denominator * o.denominator,
        )

    def subtract(self, other: RationalLike) -> RationalNumber:
        return self.add(RationalNumber.coerce(other).negate())

    def multiply(self, other: RationalLike) -> RationalNumber:
        o = RationalNumber.coerce(other)
        return RationalNumber(self.numerator * o.numerator, self.denominator * o.denominator)

    def divide(self, other: RationalLike) -> RationalNumber:
        o = RationalNumber.coerce(other)
        if o.numerator == 0:
            raise DivisionError(o, f"Cannot divide {self} by zero")
        return RationalNumber(self.numerator * o.denominator, self.denominator * o.numerator)

    def reciprocal(self) -> RationalNumber:
        if self.numerator == 0:
            raise DivisionError(self, "Zero has no reciprocal")
        return RationalNumber(self.denominator, self.numerator)

    def negate(self) -> RationalNumber:
        return RationalNumber(-self.numerator, self.denominator)

    def absolute(self) -> RationalNumber:
        return RationalNumber(abs(self.numerator), self.denominator)

    # -------------------------------------------------------------------------
    # Predicates / comparison
    # -------------------------------------------------------------------------

    def is_zero(self) -> bool:
        return self.numerator == 0

    def is_positive(self) -> bool:
        return self.numerator > 0

    def is_negative(self) -> bool:
        return self.numerator < 0

    def is_integer(self) -> bool:
        return self.denominator == 1

    def is_terminating(self) -> bool:
        """True when the value has a finite decimal expansion."""
        return terminating_scale(self.denominator) is not None

    def compare(self, other: RationalLike) -> int:
        o = RationalNumber.coerce(other)
        a = self.numerator * o.denominator
        b = o.numerator * self.denominator
        return (a > b) - (a < b)

    def _comparable(self, other: Any) -> Optional[RationalNumber]:
        if isinstance(other, (RationalNumber, FixedPointDecimal)) or (
            isinstance(other, int) and not isinstance(other, bool)
        ):
            return RationalNumber.coerce(other)
        return None

    def __eq__(self, other: Any) -> bool:
        o = self._comparable(other)
        if o is None:
            return NotImplemented
        return self.numerator == o.numerator and self.denominator == o.denominator

    def __hash__(self) -> int:
        if self.denominator == 1:
            return hash(self.numerator)
        return hash((self.numerator, self.denominator))

    def __lt__(self, other: Any) -> bool:
        o = self._comparable(other)
        return NotImplemented if o is None else self.compare(o) < 0

    def __le__(self, other: Any) -> bool:
        o = self._comparable(other)
        return NotImplemented if o is None else self.compare(o) <= 0

    def __gt__(self, other: Any) -> bool:
        o = self._comparable(other)
        return NotImplemented if o is None else self.compare(o) > 0

    def __ge__(self, other: Any) -> bool:
        o = self._comparable(other)
        return NotImplemented if o is None else self.compare(o) >= 0

    def __add__(self, other: Any) -> RationalNumber:
        o = self._comparable(other)
        return NotImplemented if o is None else self.add(o)

    __radd__ = __add__

    def __sub__(self, other: Any) -> RationalNumber:
        o = self._comparable(other)
        return NotImplemented if o is None else self.subtract(o)

    def __rsub__(self, other: Any) -> RationalNumber:
        o = self._comparable(other)
        return NotImplemented if o is None else o.subtract(self)

    def __mul__(self, other: Any) -> RationalNumber:
        o = self._comparable(other)
        return NotImplemented if o is None else self.multiply(o)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> RationalNumber:
        o = self._comparable(other)
        return NotImplemented if o is None else self.divide(o)

    def __rtruediv__(self, other: Any) -> RationalNumber:
        o = self._comparable(other)
        return NotImplemented if o is None else o.divide(self)

    def __neg__(self) -> RationalNumber:
        return self.negate()

    def __abs__(self) -> RationalNumber:
        return self.absolute()

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_fixed_point(
        self,
        scale: Optional[int] = None,
        mode: Optional[RoundingMode] = None,
    ) -> FixedPointDecimal:
        """
        Without a scale: the exact decimal (PrecisionLossError for 1/3).
        With a scale: rounded with `mode` (NONE when omitted, i.e. exact only).
        """
        if scale is None:
            exact = terminating_scale(self.denominator)
            if exact is None:
                raise PrecisionLossError(
                    f"{self} has no finite decimal representation",
                    value=self,
                    suggestion="Pass a scale and a RoundingMode to to_fixed_point().",
                )
            return FixedPointDecimal(self.numerator * 10 ** exact // self.denominator, exact)
        return apply_rounding(self, mode or RoundingMode.NONE, scale)

    def to_decimal_string(self) -> str:
        return self.to_fixed_point().to_decimal_string()

    def to_dict(self) -> dict[str, str]:
        return {"p": str(self.numerator), "q": str(self.denominator)}

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    def __repr__(self) -> str:
        return f"RationalNumber({self.numerator}, {self.denominator})"


def as_ratio(raw: RationalLike) -> RationalNumber:
    """Coerce an allocation weight; negative weights are rejected."""
    value = RationalNumber.coerce(raw)
    if value.is_negative():
        raise InvalidInputError(f"Ratios must be non-negative, got {raw}", code=ErrorCode.INVALID_RATIO)
    return value
