"""
cent — Exact decimal, rational and money arithmetic

Amounts never pass through binary floating point, every operation checks
currencies, and every precision-reducing step (rounding, division,
re-scaling) is an explicit decision of the caller.

================================================================================
QUICK START
================================================================================

Basic usage:

    from cent import Money, RoundingMode

    # Create money (never loses precision)
    price = Money.parse("$19.99")
    total = price * 3                                   # $59.97

    # Percentages
    gross = Money.parse("$100.00").add("8.25%")         # $108.25
    vat = Money.parse("$121.00").extract_percent("21%", RoundingMode.HALF_UP)  # $21.00

    # Division is exact or explicit
    Money.parse("$100.00").divide(8)                    # $12.50
    Money.parse("$100.00").divide(3, RoundingMode.HALF_UP)   # $33.33

    # Distribute equally (sum ALWAYS equals original)
    shares = Money.parse("$127.43").distribute(4)
    assert Money.sum(shares) == Money.parse("$127.43")

Exact numbers:

    from cent import FixedPointDecimal, RationalNumber

    FixedPointDecimal.parse("0.1") + FixedPointDecimal.parse("0.2")   # 0.3
    RationalNumber.parse("1234/97328")                                # 617/48664

Exchange rates:

    from cent import ExchangeRate

    rate = ExchangeRate("USD", "EUR", "0.92")
    rate.convert(Money.parse("$100.00"))                # €92.00

================================================================================
"""

# Numbers
from .fixed_point import FixedPointDecimal
from .rational import RationalNumber
from .rounding import RoundingMode, apply_rounding

# Money
from .currency import (
    Currency,
    SubUnit,
    get_currency,
    register_currency,
    USD, EUR, GBP, JPY, CHF, CAD, AUD, CNY, INR, KWD, BHD, BRL, MXN, SEK, KRW,
    BTC, ETH, SOL, USDC,
)
from .money import Money, money
from .exchange_rate import ExchangeRate, RateQuote, is_stale

# Configuration
from .config import (
    CentConfig,
    NumberInputMode,
    configure,
    get_config,
    get_default_config,
    reset_config,
    with_config,
)

# Errors
from .errors import (
    CentError,
    CurrencyMismatchError,
    DivisionError,
    EmptyArrayError,
    ErrorCode,
    ExchangeRateError,
    InvalidInputError,
    ParseError,
    PrecisionLossError,
    ValidationError,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Numbers
    "FixedPointDecimal",
    "RationalNumber",
    "RoundingMode",
    "apply_rounding",
    # Money
    "Currency",
    "SubUnit",
    "get_currency",
    "register_currency",
    "USD", "EUR", "GBP", "JPY", "CHF", "CAD", "AUD", "CNY", "INR", "KWD",
    "BHD", "BRL", "MXN", "SEK", "KRW", "BTC", "ETH", "SOL", "USDC",
    "Money",
    "money",
    "ExchangeRate",
    "RateQuote",
    "is_stale",
    # Configuration
    "CentConfig",
    "NumberInputMode",
    "configure",
    "get_config",
    "get_default_config",
    "reset_config",
    "with_config",
    # Errors
    "CentError",
    "CurrencyMismatchError",
    "DivisionError",
    "EmptyArrayError",
    "ErrorCode",
    "ExchangeRateError",
    "InvalidInputError",
    "ParseError",
    "PrecisionLossError",
    "ValidationError",
]
