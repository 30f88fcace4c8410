"""
money.py — Money domain primitive

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   A Currency plus an exact FixedPointDecimal. Never floating point.
   The amount always carries at least the currency's decimals
   ("$100" is stored as 100.00); it may carry more (sub-units, msat).

2. TYPE SAFETY
   Operations between different currencies raise CurrencyMismatchError.
   Operators (+, -) accept Money only; anything else is a TypeError.

3. IMMUTABILITY
   Frozen dataclass. Every operation returns a new instance.
   No side effects, safe to share between threads.

4. EXPLICIT ROUNDING
   add/subtract/multiply are exact. Division by a divisor made only of the
   prime factors 2 and 5 is exact; any other divisor needs a rounding mode
   from the caller (or the configured default). Nothing ever "rounds anyway".

5. VERIFIABLE INVARIANTS
   sum(distribute(n)) == self and sum(allocate(ratios)) == self, exactly.
   remove_percent(p) + extract_percent(p) == self, exactly.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, Mapping, Optional, Sequence, Union
import logging
import math

from .config import NumberInputMode, get_config
from .currency import Currency, get_currency, get_sub_unit, primary_symbol
from .errors import (
    CurrencyMismatchError,
    DivisionError,
    EmptyArrayError,
    ErrorCode,
    InvalidInputError,
    ParseError,
    PrecisionLossError,
)
from .fixed_point import FixedPointDecimal, is_exact_divisor, resolve_division_mode
from .parsing import (
    is_fraction_string,
    parse_decimal,
    parse_money_string,
    parse_number,
    parse_percentage,
)
from .rational import RationalNumber, as_ratio
from .rounding import RoundingMode
from .schemas import CurrencyModel, FixedPointModel, MoneyModel, validate

logger = logging.getLogger(__name__)

CurrencyLike = Union[Currency, str]
Factor = Union[int, str, FixedPointDecimal, RationalNumber]
Percent = Union[str, int, FixedPointDecimal]


# ==============================================================================
# INPUT HELPERS
# ==============================================================================

def _resolve_currency(currency: Optional[CurrencyLike]) -> Currency:
    if currency is None:
        return get_currency(get_config().default_currency)
    return get_currency(currency)


def _default_round_mode() -> RoundingMode:
    mode = get_config().default_rounding_mode
    return RoundingMode.HALF_UP if mode is RoundingMode.NONE else mode


def _float_to_fixed(value: float) -> FixedPointDecimal:
    """
    Convert a native float through its shortest repr ("0.1", not
    0.1000000000000000055511151231257827...).

    Governed by number_input_mode; NaN and infinities are always rejected.
    """
    config = get_config()
    if math.isnan(value) or math.isinf(value):
        raise InvalidInputError(
            f"Cannot create Money from non-finite number {value}",
            suggestion="Use a finite number or a decimal string.",
        )
    if config.number_input_mode is NumberInputMode.NEVER:
        raise InvalidInputError(
            f"Number input is disabled (number_input_mode=never), got {value!r}",
            suggestion=f'Pass the amount as a string instead: "{value!r}"',
        )

    mantissa, scale = parse_number(repr(float(value)))
    imprecise = scale > config.precision_warning_threshold or (
        abs(value) >= 2 ** 53 and not value.is_integer()
    )
    if imprecise:
        if config.strict_precision:
            raise PrecisionLossError(
                f"Float {value!r} exceeds {config.precision_warning_threshold} "
                f"significant decimal digits",
                value=value,
                suggestion="Pass the amount as a decimal string.",
            )
        if config.number_input_mode is NumberInputMode.WARN:
            logger.warning(
                "Float input %r may have lost precision before reaching cent; "
                "pass amounts as strings to keep them exact",
                value,
            )
    return FixedPointDecimal(mantissa, scale)


def percent_fraction(percent: Percent) -> FixedPointDecimal:
    """"21%" / "21" / 21 -> 0.21"""
    if isinstance(percent, str):
        parsed = parse_percentage(percent)
        if parsed is None:
            parsed = parse_decimal(percent.strip())
            return FixedPointDecimal(parsed[0], parsed[1] + 2)
        return FixedPointDecimal(*parsed)
    if isinstance(percent, FixedPointDecimal):
        return FixedPointDecimal(percent.mantissa, percent.scale + 2)
    if isinstance(percent, int) and not isinstance(percent, bool):
        return FixedPointDecimal(percent, 2)
    raise InvalidInputError(
        f"Percentage must be a string, an int or a FixedPointDecimal, got {type(percent).__name__}"
    )


def _as_factor(factor: Any) -> Union[FixedPointDecimal, RationalNumber]:
    if isinstance(factor, (FixedPointDecimal, RationalNumber)):
        return factor
    if isinstance(factor, int) and not isinstance(factor, bool):
        return FixedPointDecimal(factor, 0)
    if isinstance(factor, str):
        parsed = parse_percentage(factor)
        if parsed is not None:
            return FixedPointDecimal(*parsed)
        if is_fraction_string(factor):
            return RationalNumber.from_fraction_string(factor)
        return FixedPointDecimal.from_decimal_string(factor.strip())
    raise InvalidInputError(
        f"Cannot multiply Money by {type(factor).__name__}",
        suggestion='Use an int, a decimal string ("1.5"), a percentage ("50%") '
                   "or a RationalNumber.",
    )


def _as_divisor(divisor: Any) -> Union[FixedPointDecimal, RationalNumber]:
    if isinstance(divisor, float):
        if math.isnan(divisor) or math.isinf(divisor):
            raise DivisionError(
                divisor,
                f"Invalid divisor: {divisor}",
                code=ErrorCode.INVALID_DIVISOR,
                suggestion="Divide by a finite, non-zero number.",
            )
        return _float_to_fixed(divisor)
    return _as_factor(divisor)


def _truncate(amount: FixedPointDecimal, scale: int) -> FixedPointDecimal:
    """Drop digits beyond `scale` toward zero. Pure integer arithmetic."""
    if amount.scale <= scale:
        return amount.rescale(scale)
    magnitude = abs(amount.mantissa) // 10 ** (amount.scale - scale)
    return FixedPointDecimal(-magnitude if amount.mantissa < 0 else magnitude, scale)


def _group_thousands(digits: str) -> str:
    whole, dot, fraction = digits.partition(".")
    return f"{int(whole):,}{dot}{fraction}"


# ==============================================================================
# MONEY
# ==============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class Money:
    """
    Exact monetary amount.

    INVARIANTS:
    1. amount is always a FixedPointDecimal (no floating point)
    2. amount.scale >= currency.decimals
    3. binary operations between different currencies raise
       CurrencyMismatchError
    4. distribute(n) / allocate(ratios) preserve the total exactly

    USAGE:
        price = Money.parse("$19.99")
        total = price * 3                              # $59.97
        with_tax = total.add("8.25%", RoundingMode.HALF_UP)
        shares = with_tax.distribute(4)                # sum(shares) == with_tax

    SERIALIZATION:
        to_dict() / from_dict(). Every numeric field is a string:
        {"currency": {...}, "amount": {"amount": "5997", "decimals": "2"}}
        NEVER serialize as float.
    """
    currency: Currency
    amount: FixedPointDecimal

    # Maximum parts for distribution / allocation (DoS protection)
    MAX_DISTRIBUTION_PARTS: ClassVar[int] = 10_000

    def __post_init__(self):
        currency = self.currency
        if not isinstance(currency, Currency):
            currency = get_currency(currency)
            object.__setattr__(self, "currency", currency)
        amount = self.amount
        if not isinstance(amount, FixedPointDecimal):
            if isinstance(amount, float):
                raise InvalidInputError(
                    "Money amount cannot be a float",
                    suggestion="Use Money.from_float() or pass a decimal string.",
                )
            amount = FixedPointDecimal.coerce(amount)
        if amount.scale < currency.decimals:
            amount = amount.rescale(currency.decimals)
        object.__setattr__(self, "amount", amount)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> Money:
        """
        Parse a currency-tagged string: "$99.99", "USD 10.00", "1.5 BTC", "-€5".

        Raises:
            ParseError: INVALID_MONEY_STRING or UNKNOWN_CURRENCY
        """
        currency, mantissa, scale = parse_money_string(text)
        return cls(currency, FixedPointDecimal(mantissa, scale))

    @classmethod
    def of(
        cls,
        value: Union[int, str, FixedPointDecimal],
        currency: Optional[CurrencyLike] = None,
    ) -> Money:
        """
        Build from major units: an int (whole units), a decimal string or a
        FixedPointDecimal. Floats go through from_float().

            Money.of(2026, EUR)        # 2026.00 EUR
            Money.of("19.99", "USD")   # $19.99
        """
        if isinstance(value, float):
            return cls.from_float(value, currency)
        return cls(_resolve_currency(currency), FixedPointDecimal.coerce(value))

    @classmethod
    def of_minor(cls, minor_units: int, currency: CurrencyLike) -> Money:
        """
        From minor units (cents, satoshis, wei). No conversion, full precision.
        """
        if isinstance(minor_units, bool) or not isinstance(minor_units, int):
            raise InvalidInputError(
                f"Minor units must be an int, got {type(minor_units).__name__}"
            )
        currency = get_currency(currency)
        return cls(currency, FixedPointDecimal(minor_units, currency.decimals))

    from_minor_units = of_minor

    @classmethod
    def from_float(cls, value: float, currency: Optional[CurrencyLike] = None) -> Money:
        """
        From a native float, via its shortest repr.

        This exists for legacy systems and user input. In new code, prefer
        of() with a string or of_minor().
        """
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(f"Expected a number, got {type(value).__name__}")
        return cls(_resolve_currency(currency), _float_to_fixed(float(value)))

    @classmethod
    def from_sub_units(cls, amount: int, unit: str) -> Money:
        """
        From a named sub-unit; the name picks both currency and exponent.

            Money.from_sub_units(100_000_000, "sat")    # 1 BTC
            Money.from_sub_units(1_000, "msat")         # 0.00000001 BTC
            Money.from_sub_units(10**9, "gwei")         # 1 ETH
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidInputError(f"Sub-unit amount must be an int, got {type(amount).__name__}")
        sub_unit = get_sub_unit(unit)
        return cls(sub_unit.currency, FixedPointDecimal(amount, sub_unit.decimals))

    @classmethod
    def zero(cls, currency: Optional[CurrencyLike] = None) -> Money:
        """Additive identity at the currency's native scale."""
        currency = _resolve_currency(currency)
        return cls(currency, FixedPointDecimal(0, currency.decimals))

    @classmethod
    def from_dict(cls, data: Any) -> Money:
        """
        Accepts the full form, the compact form ({"currency": "USD", ...}) and
        a rational amount ({"p": "1", "q": "8"}). A rational with no finite
        decimal expansion raises PrecisionLossError.
        """
        model = validate(MoneyModel, data)
        if isinstance(model.currency, CurrencyModel):
            currency = Currency(
                code=model.currency.code,
                name=model.currency.name,
                decimals=int(model.currency.decimals),
                symbol=model.currency.symbol,
                fractional_unit=model.currency.fractional_unit,
                iso_4217=model.currency.iso_4217,
            )
        else:
            currency = get_currency(model.currency)
        if isinstance(model.amount, FixedPointModel):
            amount = FixedPointDecimal(int(model.amount.amount), int(model.amount.decimals))
        else:
            amount = RationalNumber(int(model.amount.p), int(model.amount.q)).to_fixed_point()
        return cls(currency, amount)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _with(self, amount: FixedPointDecimal) -> Money:
        return Money(self.currency, amount)

    def _check_same_currency(self, other: Any, operation: str) -> Money:
        if not isinstance(other, Money):
            raise TypeError(
                f"Cannot {operation} Money and {type(other).__name__}. "
                f"Use Money.parse() or Money.of() to convert."
            )
        if other.currency.code != self.currency.code:
            raise CurrencyMismatchError(self.currency.code, other.currency.code, operation)
        return other

    def _money_operand(self, other: Union[Money, str], operation: str) -> Money:
        if isinstance(other, str):
            other = Money.parse(other)
        return self._check_same_currency(other, operation)

    def _exact(self, value: RationalNumber) -> Money:
        amount = value.to_fixed_point()
        if amount.scale < self.amount.scale:
            amount = amount.rescale(self.amount.scale)
        return self._with(amount)

    def _settle(self, value: RationalNumber, mode: Optional[RoundingMode], factor: Any) -> Money:
        """Exact product when it terminates, otherwise rounded to the currency scale."""
        if mode is None and value.is_terminating():
            return self._exact(value)
        if mode is None:
            mode = get_config().default_rounding_mode
            if mode is RoundingMode.NONE:
                raise PrecisionLossError(
                    f"multiply of {self} by {factor} has no finite decimal "
                    f"representation and no rounding mode was given",
                    value=value,
                    suggestion="Pass a RoundingMode.",
                )
        return self._with(value.to_fixed_point(self.currency.decimals, mode))

    def _rounded(self, mode: Optional[RoundingMode]) -> Money:
        if mode is None:
            return self
        return self._with(self.amount.round(self.currency.decimals, mode))

    # -------------------------------------------------------------------------
    # Arithmetic (type-safe)
    # -------------------------------------------------------------------------

    def add(self, other: Union[Money, str], mode: Optional[RoundingMode] = None) -> Money:
        """
        Add Money, a money string, or a percentage of this amount.

            Money.parse("$100.00").add("8.25%")    # $108.25
            Money.parse("$100.00").add("$0.50")    # $100.50

        With a mode the result is rounded to the currency's decimals.
        """
        fraction = parse_percentage(other) if isinstance(other, str) else None
        if fraction is not None:
            delta = self.amount.multiply(FixedPointDecimal(*fraction))
            return self._with(self.amount.add(delta))._rounded(mode)
        operand = self._money_operand(other, "add")
        return self._with(self.amount.add(operand.amount))._rounded(mode)

    def subtract(self, other: Union[Money, str], mode: Optional[RoundingMode] = None) -> Money:
        """Subtract Money, a money string, or a percentage ("10%") of this amount."""
        fraction = parse_percentage(other) if isinstance(other, str) else None
        if fraction is not None:
            delta = self.amount.multiply(FixedPointDecimal(*fraction))
            return self._with(self.amount.subtract(delta))._rounded(mode)
        operand = self._money_operand(other, "subtract")
        return self._with(self.amount.subtract(operand.amount))._rounded(mode)

    def multiply(self, factor: Factor, mode: Optional[RoundingMode] = None) -> Money:
        """
        Exact product. Factors: int, decimal string, percentage string ("50%"),
        fraction string ("1/3"), FixedPointDecimal, RationalNumber.

        With a mode the product is rounded to the currency's decimals. A
        non-terminating rational product needs a mode (or a configured
        default), else PrecisionLossError.
        """
        operand = _as_factor(factor)
        if isinstance(operand, FixedPointDecimal):
            return self._with(self.amount.multiply(operand))._rounded(mode)
        return self._settle(self.amount.to_rational().multiply(operand), mode, factor)

    def divide(self, divisor: Any, mode: Optional[RoundingMode] = None) -> Money:
        """
        Divide by an int, float, decimal/percentage/fraction string,
        FixedPointDecimal or RationalNumber.

        A divisor with no prime factors other than 2 and 5 (2, 8, "0.5",
        "1.25", 1/3 as a fraction) divides exactly and `mode` is ignored:
        "$1.00" / 8 == "$0.125". Any other divisor needs `mode` or the
        configured default, and the quotient is rounded to the currency's
        decimals, even when it happens to terminate ("$1.50" / 3).

        Raises:
            DivisionError: DIVISION_BY_ZERO, INVALID_DIVISOR (NaN, infinity)
                or DIVISION_REQUIRES_ROUNDING
        """
        operand = _as_divisor(divisor)
        if operand.is_zero():
            raise DivisionError(
                divisor,
                f"Cannot divide {self} by zero",
                code=ErrorCode.DIVISION_BY_ZERO,
            )
        quotient = self.amount.to_rational().divide(operand)
        if is_exact_divisor(operand.numerator):
            return self._exact(quotient)
        mode = resolve_division_mode(mode, self, divisor)
        return self._with(quotient.to_fixed_point(self.currency.decimals, mode))

    def negate(self) -> Money:
        return self._with(self.amount.negate())

    def absolute(self) -> Money:
        return self._with(self.amount.absolute())

    def __add__(self, other: Money) -> Money:
        return self._with(self.amount.add(self._check_same_currency(other, "add").amount))

    def __sub__(self, other: Money) -> Money:
        return self._with(self.amount.subtract(self._check_same_currency(other, "subtract").amount))

    def __neg__(self) -> Money:
        return self.negate()

    def __abs__(self) -> Money:
        return self.absolute()

    def __mul__(self, factor: Union[int, FixedPointDecimal]) -> Money:
        """
        Multiply by a quantity.

        Example: unit_price * quantity

        For percentages and fractions, use multiply().
        """
        if isinstance(factor, bool) or not isinstance(factor, (int, FixedPointDecimal)):
            raise TypeError(
                f"Money can only be multiplied by int or FixedPointDecimal, "
                f"not {type(factor).__name__}. For percentages use multiply(\"15%\")."
            )
        return self.multiply(factor)

    def __rmul__(self, factor: Union[int, FixedPointDecimal]) -> Money:
        return self.__mul__(factor)

    # -------------------------------------------------------------------------
    # Rounding
    # -------------------------------------------------------------------------

    def round(self, mode: Optional[RoundingMode] = None) -> Money:
        """
        Round to the currency's decimals. Default mode: HALF_UP, unless a
        default rounding mode is configured.
        """
        return self._with(self.amount.round(self.currency.decimals, mode or _default_round_mode()))

    def round_to(self, decimals: int, mode: Optional[RoundingMode] = None) -> Money:
        """
        Round to an explicit number of decimals (may be finer than the
        currency's). Negative `decimals` raises InvalidInputError.
        """
        if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
            raise InvalidInputError(
                f"Decimal places must be a non-negative integer, got {decimals!r}",
                code=ErrorCode.INVALID_PRECISION,
            )
        rounded = self.amount.round(decimals, mode or _default_round_mode())
        return self._with(rounded)

    # -------------------------------------------------------------------------
    # Percentages
    # -------------------------------------------------------------------------

    def extract_percent(self, percent: Percent, mode: Optional[RoundingMode] = None) -> Money:
        """
        The part of this amount that is `percent` on top of a base.

            Money.parse("$121.00").extract_percent("21%", RoundingMode.HALF_UP)   # $21.00

        Formula: portion = total - remove_percent(p)
        """
        return self.split_percent(percent, mode)[1]

    def remove_percent(self, percent: Percent, mode: Optional[RoundingMode] = None) -> Money:
        """
        The base before `percent` was added (the net of a gross price).

        Formula: base = total / (1 + p), divided like divide(): 1 + p = 1.25
        is exact, 1 + p = 1.21 needs a rounding mode.

        INVARIANT: remove_percent(p) + extract_percent(p) == self (exactly)
        """
        return self.divide(percent_fraction(percent).add(1), mode)

    def split_percent(self, percent: Percent, mode: Optional[RoundingMode] = None) -> tuple[Money, Money]:
        """
        Returns:
            (base, portion) with base + portion == self
        """
        base = self.remove_percent(percent, mode)
        return base, self._with(self.amount.subtract(base.amount))

    # -------------------------------------------------------------------------
    # Distribution
    # -------------------------------------------------------------------------

    def _check_parts(self, n: int) -> None:
        if isinstance(n, bool) or not isinstance(n, int):
            raise InvalidInputError(f"Number of parts must be an int, got {type(n).__name__}")
        if n <= 0:
            raise InvalidInputError(f"Number of parts must be positive, got {n}")
        if n > self.MAX_DISTRIBUTION_PARTS:
            raise InvalidInputError(
                f"Number of parts {n} exceeds the limit of {self.MAX_DISTRIBUTION_PARTS}"
            )

    def _working(self, distribute_fractional_units: bool) -> tuple[FixedPointDecimal, Optional[Money]]:
        if distribute_fractional_units or not self.has_sub_units():
            return self.amount, None
        concrete, change = self.concretize()
        return concrete.amount, change

    def distribute(self, n: int, distribute_fractional_units: bool = True) -> list[Money]:
        """
        Split into n parts whose sum is EXACTLY self.

        Algorithm: Largest Remainder Method in share order. Base share is the
        amount / n truncated toward zero at the working scale; the leftover
        minimal units go one each to the first shares.

        There is no rounding mode parameter: every mode would only move the
        same leftover units between shares, and the largest remainder rule
        already places them deterministically with the sum preserved.

        With distribute_fractional_units=False, digits beyond the currency's
        decimals are split off first and returned as an extra trailing element
        (only when non-zero).

        Raises:
            InvalidInputError: if n <= 0 or n > MAX_DISTRIBUTION_PARTS
        """
        self._check_parts(n)
        working, change = self._working(distribute_fractional_units)

        units = working.mantissa
        sign = -1 if units < 0 else 1
        base, remainder = divmod(abs(units), n)

        parts = [
            self._with(FixedPointDecimal(sign * (base + (1 if i < remainder else 0)), working.scale))
            for i in range(n)
        ]
        if change is not None and not change.is_zero():
            parts.append(change)
        return parts

    def allocate(
        self,
        ratios: Sequence[Union[int, str, FixedPointDecimal, RationalNumber]],
        distribute_fractional_units: bool = True,
    ) -> list[Money]:
        """
        Split proportionally to `ratios`, preserving the total exactly.

        Each ideal share amount * r_i / sum(r) is computed as an exact
        fraction and truncated toward zero; the leftover minimal units go to
        the shares with the largest fractional remainders (ties: lowest index).

            Money.parse("$100").allocate([1, 2, 1])    # [$25.00, $50.00, $25.00]
            Money.parse("$0.05").allocate([1, 1])      # [$0.03, $0.02]
        """
        if not ratios:
            raise InvalidInputError("Cannot allocate with an empty list of ratios",
                                    code=ErrorCode.INVALID_RATIO)
        if len(ratios) > self.MAX_DISTRIBUTION_PARTS:
            raise InvalidInputError(
                f"Number of ratios exceeds the limit of {self.MAX_DISTRIBUTION_PARTS}",
                code=ErrorCode.INVALID_RATIO,
            )
        weights = [as_ratio(r) for r in ratios]
        total = RationalNumber(0)
        for w in weights:
            total = total.add(w)
        if total.is_zero():
            raise InvalidInputError(
                "Cannot allocate with all zero ratios",
                code=ErrorCode.INVALID_RATIO,
                suggestion="At least one ratio must be greater than zero.",
            )

        working, change = self._working(distribute_fractional_units)
        units = abs(working.mantissa)
        sign = -1 if working.mantissa < 0 else 1

        shares: list[int] = []
        remainders: list[RationalNumber] = []
        for w in weights:
            numerator = units * w.numerator * total.denominator
            denominator = w.denominator * total.numerator
            share, rest = divmod(numerator, denominator)
            shares.append(share)
            remainders.append(RationalNumber(rest, denominator))

        leftover = units - sum(shares)
        by_remainder = sorted(range(len(shares)), key=lambda i: (-remainders[i], i))
        for i in by_remainder[:leftover]:
            shares[i] += 1

        parts = [self._with(FixedPointDecimal(sign * s, working.scale)) for s in shares]
        if change is not None and not change.is_zero():
            parts.append(change)
        return parts

    def concretize(self) -> tuple[Money, Money]:
        """
        Split into (concrete, change): the amount truncated toward zero to the
        currency's decimals, and the sub-unit rest. concrete + change == self.
        """
        concrete = self._with(_truncate(self.amount, self.currency.decimals))
        return concrete, self._with(self.amount.subtract(concrete.amount))

    def has_change(self) -> bool:
        return not self.concretize()[1].is_zero()

    def has_sub_units(self) -> bool:
        """True when non-zero digits exist beyond the currency's decimals."""
        return self.amount.normalized().scale > self.currency.decimals

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    @staticmethod
    def _collect(items: tuple[Any, ...]) -> list[Money]:
        if len(items) == 1 and not isinstance(items[0], Money):
            return list(items[0])
        return list(items)

    @staticmethod
    def _check_all_same_currency(items: list[Money], operation: str) -> None:
        first = items[0]
        for item in items[1:]:
            first._check_same_currency(item, operation)

    @staticmethod
    def sum(items: Iterable[Money], default: Optional[Money] = None) -> Money:
        """
        Exact total. Every currency is checked before any arithmetic.

        Raises:
            EmptyArrayError: empty input and no default
        """
        values = list(items)
        if not values:
            if default is not None:
                return default
            raise EmptyArrayError("sum")
        Money._check_all_same_currency(values, "sum")
        total = values[0].amount
        for item in values[1:]:
            total = total.add(item.amount)
        return values[0]._with(total)

    @staticmethod
    def avg(
        items: Iterable[Money],
        mode: Optional[RoundingMode] = None,
        default: Optional[Money] = None,
    ) -> Money:
        """Mean; an inexact division needs a rounding mode like divide()."""
        values = list(items)
        if not values:
            if default is not None:
                return default
            raise EmptyArrayError("avg")
        return Money.sum(values).divide(len(values), mode)

    @staticmethod
    def min(*items: Any, default: Optional[Money] = None) -> Money:
        """Money.min(a, b, c) or Money.min([a, b, c]). First wins on ties."""
        values = Money._collect(items)
        if not values:
            if default is not None:
                return default
            raise EmptyArrayError("min")
        Money._check_all_same_currency(values, "min")
        result = values[0]
        for item in values[1:]:
            if item.amount < result.amount:
                result = item
        return result

    @staticmethod
    def max(*items: Any, default: Optional[Money] = None) -> Money:
        """Money.max(a, b, c) or Money.max([a, b, c]). First wins on ties."""
        values = Money._collect(items)
        if not values:
            if default is not None:
                return default
            raise EmptyArrayError("max")
        Money._check_all_same_currency(values, "max")
        result = values[0]
        for item in values[1:]:
            if item.amount > result.amount:
                result = item
        return result

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare(self, other: Union[Money, str]) -> int:
        """-1, 0 or 1. Requires the same currency."""
        return self.amount.compare(self._money_operand(other, "compare").amount)

    def equals(self, other: Union[Money, str]) -> bool:
        return self.compare(other) == 0

    def less_than(self, other: Union[Money, str]) -> bool:
        return self.compare(other) < 0

    def less_than_or_equal(self, other: Union[Money, str]) -> bool:
        return self.compare(other) <= 0

    def greater_than(self, other: Union[Money, str]) -> bool:
        return self.compare(other) > 0

    def greater_than_or_equal(self, other: Union[Money, str]) -> bool:
        return self.compare(other) >= 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Money):
            return self.currency.code == other.currency.code and self.amount == other.amount
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.currency.code, self.amount))

    def __lt__(self, other: Money) -> bool:
        return self.amount < self._check_same_currency(other, "compare").amount

    def __le__(self, other: Money) -> bool:
        return self.amount <= self._check_same_currency(other, "compare").amount

    def __gt__(self, other: Money) -> bool:
        return self.amount > self._check_same_currency(other, "compare").amount

    def __ge__(self, other: Money) -> bool:
        return self.amount >= self._check_same_currency(other, "compare").amount

    def is_zero(self) -> bool:
        return self.amount.is_zero()

    def is_positive(self) -> bool:
        return self.amount.is_positive()

    def is_negative(self) -> bool:
        return self.amount.is_negative()

    # -------------------------------------------------------------------------
    # Conversion and output
    # -------------------------------------------------------------------------

    @property
    def minor_units(self) -> int:
        """Exact value in minor units; PrecisionLossError if sub-units exist."""
        return self.to_minor_units()

    def to_minor_units(self, mode: Optional[RoundingMode] = None) -> int:
        """
        Integer count of the currency's smallest unit (cents, satoshis).
        Without a mode, sub-unit digits raise PrecisionLossError.
        """
        return self.amount.round(self.currency.decimals, mode or RoundingMode.NONE).mantissa

    def to_decimal_string(self) -> str:
        return self.amount.to_decimal_string()

    def to_string(self, use_symbol: bool = True, grouping: bool = True) -> str:
        """
        Human-readable, exact rendering.

            "$1,234.50"    ISO currency owning its symbol
            "10.00 CAD"    use_symbol=False, or a symbol owned by another currency
            "0.5 BTC"      non-ISO assets: trailing zeros trimmed, code suffix

        Never rounds: digits beyond the currency's decimals are shown.
        """
        magnitude = self.amount.absolute()
        if self.currency.iso_4217:
            normalized = magnitude.normalized()
            magnitude = magnitude.rescale(max(normalized.scale, self.currency.decimals))
        else:
            magnitude = magnitude.normalized()
        digits = magnitude.to_decimal_string()
        if grouping:
            digits = _group_thousands(digits)
        sign = "-" if self.amount.is_negative() else ""

        symbol = primary_symbol(self.currency) if use_symbol and self.currency.iso_4217 else None
        if symbol is not None:
            return f"{sign}{symbol}{digits}"
        return f"{sign}{digits} {self.currency.code}"

    def to_dict(self, compact: bool = False) -> dict[str, Any]:
        """
        Serialize for persistence/API.

        Format: {"currency": {...} | "USD", "amount": {"amount": str, "decimals": str}}
        """
        return {
            "currency": self.currency.code if compact else self.currency.to_dict(),
            "amount": self.amount.to_dict(),
        }

    def convert(self, rate: Any, mode: Optional[RoundingMode] = None) -> Money:
        """Convert with an ExchangeRate whose base or quote is this currency."""
        return rate.convert(self, mode)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Money({self.currency.code}, '{self.amount}')"


# ==============================================================================
# FACTORY
# ==============================================================================

def money(
    value: Union[Money, str, int, float, FixedPointDecimal, Mapping[str, Any]],
    currency: Optional[CurrencyLike] = None,
) -> Money:
    """
    One-stop factory.

        money("$19.99")             # parse a money string
        money("19.99", "EUR")       # decimal string + currency
        money(1999, "USD")          # int = MINOR units -> $19.99
        money(19.99, "USD")         # float, governed by number_input_mode
        money({"currency": "USD", "amount": {"amount": "1999", "decimals": "2"}})
    """
    if isinstance(value, Money):
        if currency is not None and get_currency(currency).code != value.currency.code:
            raise CurrencyMismatchError(get_currency(currency).code, value.currency.code, "create")
        return value
    if isinstance(value, Mapping):
        return Money.from_dict(value)
    if isinstance(value, bool):
        raise InvalidInputError("Cannot create Money from a bool")
    if isinstance(value, int):
        return Money.of_minor(value, _resolve_currency(currency))
    if isinstance(value, float):
        return Money.from_float(value, currency)
    if isinstance(value, FixedPointDecimal):
        return Money(_resolve_currency(currency), value)
    if isinstance(value, str):
        try:
            mantissa, scale = parse_decimal(value.strip())
        except ParseError:
            parsed = Money.parse(value)
            if currency is not None and get_currency(currency).code != parsed.currency.code:
                raise CurrencyMismatchError(get_currency(currency).code, parsed.currency.code, "create")
            return parsed
        return Money(_resolve_currency(currency), FixedPointDecimal(mantissa, scale))
    raise InvalidInputError(
        f"Cannot create Money from {type(value).__name__}",
        example='money("$10.00"), money("10.00", "USD"), money(1000, "USD")',
    )
