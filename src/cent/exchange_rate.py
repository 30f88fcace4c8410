"""
exchange_rate.py — Currency pair rates

An ExchangeRate states how many QUOTE units one BASE unit is worth:

    ExchangeRate("USD", "EUR", "0.92")     1 USD = 0.92 EUR

It owns no Money. convert() works in both directions (base -> quote
multiplies, quote -> base divides) with exact rational arithmetic, and only
rounds at the very end, to the target currency's decimals, with an explicit
mode. Staleness is derived from observed_at on demand; nothing mutates.

Fetching rates is out of scope: the caller supplies them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, NamedTuple, Optional, Union

from pydantic import TypeAdapter

from .config import get_config
from .currency import Currency, get_currency
from .errors import ErrorCode, ExchangeRateError, PrecisionLossError
from .fixed_point import FixedPointDecimal
from .money import Money, percent_fraction
from .parsing import is_fraction_string, parse_percentage
from .rational import RationalNumber
from .rounding import RoundingMode, apply_rounding
from .schemas import ExchangeRateModel, FixedPointModel, validate

RateValue = Union[FixedPointDecimal, RationalNumber]

_datetime_adapter = TypeAdapter(datetime)


def _utc(value: Union[datetime, str, None]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, str):
        value = _datetime_adapter.validate_python(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _as_rate(value: Any) -> RateValue:
    if isinstance(value, (FixedPointDecimal, RationalNumber)):
        return value
    if isinstance(value, str) and is_fraction_string(value):
        return RationalNumber.from_fraction_string(value)
    return FixedPointDecimal.coerce(value.strip() if isinstance(value, str) else value)


def _tidy(value: RationalNumber) -> RateValue:
    """Back to FixedPointDecimal when the value terminates."""
    if value.is_terminating():
        return value.to_fixed_point()
    return value


def _seconds(threshold: Union[timedelta, int, float]) -> timedelta:
    if isinstance(threshold, timedelta):
        return threshold
    return timedelta(seconds=threshold)


class RateQuote(NamedTuple):
    """Bid/ask pair around a mid rate."""
    bid: "ExchangeRate"
    ask: "ExchangeRate"
    mid: "ExchangeRate"


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """
    USAGE:
        rate = ExchangeRate("USD", "EUR", "0.92", source="ecb")
        rate.convert(Money.parse("$100.00"))               # 92.00 EUR
        rate.convert(Money.parse("€10.00"), RoundingMode.HALF_EVEN)
        rate.is_stale(timedelta(minutes=5))

    INVARIANTS:
    1. rate > 0
    2. base != quote
    3. observed_at is timezone-aware UTC
    """
    base: Currency
    quote: Currency
    rate: RateValue
    observed_at: datetime = field(default=None)  # type: ignore[assignment]
    source: Optional[str] = None

    def __post_init__(self):
        base, quote = get_currency(self.base), get_currency(self.quote)
        rate = _as_rate(self.rate)
        if not rate.is_positive():
            raise ExchangeRateError(
                f"Exchange rate must be positive, got {rate} for {base.code}/{quote.code}"
            )
        if base.code == quote.code:
            raise ExchangeRateError(f"Base and quote currency are the same: {base.code}")
        object.__setattr__(self, "base", base)
        object.__setattr__(self, "quote", quote)
        object.__setattr__(self, "rate", rate)
        object.__setattr__(self, "observed_at", _utc(self.observed_at))

    @property
    def pair(self) -> str:
        return f"{self.base.code}/{self.quote.code}"

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def convert(self, money: Money, mode: Optional[RoundingMode] = None) -> Money:
        """
        Convert base -> quote (multiply) or quote -> base (divide).

        The result has the target currency's decimals. An inexact result is
        rounded with `mode` or the configured default; with neither,
        PrecisionLossError.

        Raises:
            ExchangeRateError: EXCHANGE_RATE_MISMATCH if money is in neither
                currency of the pair
        """
        rate = RationalNumber.coerce(self.rate)
        amount = money.amount.to_rational()
        if money.currency.code == self.base.code:
            value, target = amount.multiply(rate), self.quote
        elif money.currency.code == self.quote.code:
            value, target = amount.divide(rate), self.base
        else:
            raise ExchangeRateError(
                f"Cannot convert {money.currency.code} with a {self.pair} rate: "
                f"expected {self.base.code} or {self.quote.code}",
                code=ErrorCode.EXCHANGE_RATE_MISMATCH,
            )

        scaled = value.multiply(target.multiplier)
        if not scaled.is_integer():
            if mode is None:
                mode = get_config().default_rounding_mode
            if mode is RoundingMode.NONE:
                raise PrecisionLossError(
                    f"Converting {money} at {self.pair} {self.rate} does not fit "
                    f"{target.decimals} decimals of {target.code}",
                    value=value,
                    suggestion="Pass a RoundingMode to convert().",
                )
        return Money(target, apply_rounding(value, mode or RoundingMode.NONE, target.decimals))

    # -------------------------------------------------------------------------
    # Derived rates
    # -------------------------------------------------------------------------

    def invert(self) -> ExchangeRate:
        """EUR/USD from USD/EUR. Exact: non-terminating inverses stay rational."""
        inverse = RationalNumber.coerce(self.rate).reciprocal()
        return ExchangeRate(self.quote, self.base, _tidy(inverse), self.observed_at, self.source)

    def multiply(self, other: Union[ExchangeRate, FixedPointDecimal, RationalNumber, int, str]) -> ExchangeRate:
        """
        Scale by a scalar, or chain with another rate sharing a currency:

            A/B * B/C = A/C
            A/B * C/A = C/B
        """
        rate = RationalNumber.coerce(self.rate)
        if isinstance(other, ExchangeRate):
            other_rate = RationalNumber.coerce(other.rate)
            if self.quote.code == other.base.code:
                base, quote = self.base, other.quote
            elif self.base.code == other.quote.code:
                base, quote = other.base, self.quote
            else:
                raise ExchangeRateError(
                    f"Cannot chain {self.pair} with {other.pair}: no shared currency",
                    code=ErrorCode.EXCHANGE_RATE_MISMATCH,
                )
            observed_at = min(self.observed_at, other.observed_at)
            return ExchangeRate(base, quote, _tidy(rate.multiply(other_rate)), observed_at, self.source)
        product = rate.multiply(RationalNumber.coerce(_as_rate(other)))
        return ExchangeRate(self.base, self.quote, _tidy(product), self.observed_at, self.source)

    def spread(self, spread: Union[str, FixedPointDecimal]) -> RateQuote:
        """
        Symmetric bid/ask around this rate; `spread` is the total width as a
        fraction ("0.02") or a percentage ("2%").
        """
        if isinstance(spread, str) and parse_percentage(spread) is not None:
            width = percent_fraction(spread).to_rational()
        else:
            width = RationalNumber.coerce(_as_rate(spread))
        half = width.divide(2)
        rate = RationalNumber.coerce(self.rate)
        bid = rate.multiply(RationalNumber(1).subtract(half))
        ask = rate.multiply(RationalNumber(1).add(half))
        return RateQuote(
            bid=ExchangeRate(self.base, self.quote, _tidy(bid), self.observed_at, self.source),
            ask=ExchangeRate(self.base, self.quote, _tidy(ask), self.observed_at, self.source),
            mid=self,
        )

    @staticmethod
    def average(rates: Iterable[ExchangeRate]) -> ExchangeRate:
        """
        Arithmetic mean of rates for the same pair. The result is observed at
        the most recent observation.
        """
        values = list(rates)
        if not values:
            raise ExchangeRateError("At least one exchange rate is required for averaging")
        first = values[0]
        total = RationalNumber(0)
        for rate in values:
            if rate.pair != first.pair:
                raise ExchangeRateError(
                    f"Cannot average {first.pair} with {rate.pair}",
                    code=ErrorCode.EXCHANGE_RATE_MISMATCH,
                )
            total = total.add(RationalNumber.coerce(rate.rate))
        sources = {r.source for r in values}
        return ExchangeRate(
            first.base,
            first.quote,
            _tidy(total.divide(len(values))),
            max(r.observed_at for r in values),
            first.source if len(sources) == 1 else None,
        )

    # -------------------------------------------------------------------------
    # Staleness
    # -------------------------------------------------------------------------

    def age(self, now: Optional[datetime] = None) -> timedelta:
        return _utc(now) - self.observed_at

    def is_stale(self, threshold: Union[timedelta, int, float], now: Optional[datetime] = None) -> bool:
        """now - observed_at > threshold (seconds when numeric)."""
        return self.age(now) > _seconds(threshold)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "base": self.base.code,
            "quote": self.quote.code,
            "rate": self.rate.to_dict(),
            "observed_at": self.observed_at.isoformat(),
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ExchangeRate:
        model = validate(ExchangeRateModel, data)
        if isinstance(model.rate, FixedPointModel):
            rate: RateValue = FixedPointDecimal(int(model.rate.amount), int(model.rate.decimals))
        else:
            rate = RationalNumber(int(model.rate.p), int(model.rate.q))
        return cls(model.base, model.quote, rate, model.observed_at, model.source)

    def __str__(self) -> str:
        return f"1 {self.base.code} = {self.rate} {self.quote.code}"


def is_stale(
    rate: ExchangeRate,
    threshold: Union[timedelta, int, float],
    now: Optional[datetime] = None,
) -> bool:
    """Functional form of ExchangeRate.is_stale()."""
    return rate.is_stale(threshold, now)
