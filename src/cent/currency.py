"""
currency.py — Currency and asset reference data

================================================================================
DESIGN
================================================================================

A Currency is read-only reference data: code, name, number of decimals of the
minor unit, optional symbol. Money references it but never copies it
mutably. Two currencies denote the same asset iff their codes match.

ISO 4217 defines:
- alphabetic code (EUR, USD, ...)
- minor unit (number of decimals)

Crypto assets reuse the same descriptor with iso_4217=False and usually a
much larger number of decimals (BTC=8, ETH=18).

Symbols are ambiguous ("$" is used by dozens of currencies). Each symbol has
at most one PRIMARY owner, used both to parse "$10" and to decide whether
"$" may be printed when rendering. Other currencies render with their code.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple, Optional

from .errors import ErrorCode, InvalidInputError, ParseError


# ==============================================================================
# CURRENCY DESCRIPTOR
# ==============================================================================

@dataclass(frozen=True, slots=True)
class Currency:
    """
    Currency / asset descriptor.

    USAGE:
        USD.decimals        # 2
        USD.multiplier      # 100
        get_currency("btc") # BTC
    """
    code: str
    name: str
    decimals: int
    symbol: Optional[str] = None
    fractional_unit: Optional[str] = None
    iso_4217: bool = True

    def __post_init__(self):
        if not isinstance(self.decimals, int) or self.decimals < 0:
            raise InvalidInputError(
                f"Currency decimals must be a non-negative integer, got {self.decimals!r}",
                code=ErrorCode.INVALID_PRECISION,
            )

    @property
    def multiplier(self) -> int:
        """Conversion factor major -> minor unit."""
        return 10 ** self.decimals

    def same_as(self, other: "Currency") -> bool:
        return self.code == other.code

    def to_dict(self) -> dict[str, object]:
        """Interchange form; decimals is a string like every numeric field."""
        return {
            "code": self.code,
            "name": self.name,
            "decimals": str(self.decimals),
            "symbol": self.symbol,
            "fractional_unit": self.fractional_unit,
            "iso_4217": self.iso_4217,
        }

    def __str__(self) -> str:
        return self.code


# ==============================================================================
# FIAT (ISO 4217)
# ==============================================================================

USD = Currency("USD", "United States Dollar", 2, "$", "cent")
EUR = Currency("EUR", "Euro", 2, "€", "cent")
GBP = Currency("GBP", "British Pound Sterling", 2, "£", "penny")
JPY = Currency("JPY", "Japanese Yen", 0, "¥")
CHF = Currency("CHF", "Swiss Franc", 2, "CHF", "rappen")
CAD = Currency("CAD", "Canadian Dollar", 2, "CA$", "cent")
AUD = Currency("AUD", "Australian Dollar", 2, "A$", "cent")
CNY = Currency("CNY", "Chinese Yuan", 2, "¥", "fen")
INR = Currency("INR", "Indian Rupee", 2, "₹", "paisa")
KWD = Currency("KWD", "Kuwaiti Dinar", 3, "KD", "fils")     # 1 KWD = 1000 fils
BHD = Currency("BHD", "Bahraini Dinar", 3, "BD", "fils")
BRL = Currency("BRL", "Brazilian Real", 2, "R$", "centavo")
MXN = Currency("MXN", "Mexican Peso", 2, "MX$", "centavo")
SEK = Currency("SEK", "Swedish Krona", 2, "kr", "öre")
KRW = Currency("KRW", "South Korean Won", 0, "₩")


# ==============================================================================
# CRYPTO ASSETS
# ==============================================================================

BTC = Currency("BTC", "Bitcoin", 8, "₿", "satoshi", iso_4217=False)
ETH = Currency("ETH", "Ether", 18, "Ξ", "wei", iso_4217=False)
SOL = Currency("SOL", "Solana", 9, "◎", "lamport", iso_4217=False)
USDC = Currency("USDC", "USD Coin", 6, None, None, iso_4217=False)


# ==============================================================================
# REGISTRY
# ==============================================================================

_REGISTRY: dict[str, Currency] = {
    c.code: c
    for c in (USD, EUR, GBP, JPY, CHF, CAD, AUD, CNY, INR, KWD, BHD, BRL, MXN,
              SEK, KRW, BTC, ETH, SOL, USDC)
}

# symbol -> primary owner. "¥" goes to JPY (most traded), CNY renders as code.
PRIMARY_SYMBOL_MAP: dict[str, Currency] = {
    "$": USD,
    "€": EUR,
    "£": GBP,
    "¥": JPY,
    "₹": INR,
    "₩": KRW,
    "CA$": CAD,
    "A$": AUD,
    "R$": BRL,
    "MX$": MXN,
    "₿": BTC,
    "Ξ": ETH,
    "◎": SOL,
}


def find_currency(code: str) -> Optional[Currency]:
    """Registry lookup by code (case-insensitive). None when unknown."""
    return _REGISTRY.get(code.strip().upper())


def get_currency(code: str | Currency) -> Currency:
    """
    Resolve a currency code to its descriptor.

    Raises:
        ParseError: UNKNOWN_CURRENCY when the code is not registered
    """
    if isinstance(code, Currency):
        return code
    if not isinstance(code, str):
        raise InvalidInputError(f"Currency must be a code or Currency, got {type(code).__name__}")
    currency = find_currency(code)
    if currency is None:
        raise ParseError(
            code,
            f'Unsupported currency: "{code}"',
            code=ErrorCode.UNKNOWN_CURRENCY,
            suggestion="Register it first with register_currency().",
        )
    return currency


def register_currency(currency: Currency, *, primary_symbol: bool = False) -> Currency:
    """
    Add (or replace) a currency in the registry.

    With primary_symbol=True the currency also becomes the owner of its symbol
    for parsing and rendering.
    """
    _REGISTRY[currency.code.upper()] = currency
    if primary_symbol and currency.symbol:
        PRIMARY_SYMBOL_MAP[currency.symbol] = currency
    return currency


def registered_currencies() -> list[Currency]:
    return sorted(_REGISTRY.values(), key=lambda c: c.code)


def primary_symbol(currency: Currency) -> Optional[str]:
    """Symbol to render for `currency`, or None if it does not own its symbol."""
    if currency.symbol is None:
        return None
    owner = PRIMARY_SYMBOL_MAP.get(currency.symbol)
    if owner is not None and owner.code == currency.code:
        return currency.symbol
    return None


# ==============================================================================
# SUB-UNITS
# ==============================================================================

class SubUnit(NamedTuple):
    """Named smallest denomination: 1 unit = 10**-decimals of `currency`."""
    currency: Currency
    decimals: int


SUB_UNITS: dict[str, SubUnit] = {
    # Bitcoin
    "satoshi": SubUnit(BTC, 8),
    "sat": SubUnit(BTC, 8),
    "sats": SubUnit(BTC, 8),
    "millisatoshi": SubUnit(BTC, 11),
    "msat": SubUnit(BTC, 11),
    "msats": SubUnit(BTC, 11),
    # Ethereum
    "wei": SubUnit(ETH, 18),
    "kwei": SubUnit(ETH, 15),
    "mwei": SubUnit(ETH, 12),
    "gwei": SubUnit(ETH, 9),
    "szabo": SubUnit(ETH, 6),
    "finney": SubUnit(ETH, 3),
    # Solana
    "lamport": SubUnit(SOL, 9),
    "lamports": SubUnit(SOL, 9),
    # Fiat, for convenience
    "cent": SubUnit(USD, 2),
    "cents": SubUnit(USD, 2),
    "penny": SubUnit(GBP, 2),
    "pence": SubUnit(GBP, 2),
    "eurocent": SubUnit(EUR, 2),
}


def get_sub_unit(name: str) -> SubUnit:
    """
    Raises:
        InvalidInputError: for an unknown sub-unit name
    """
    unit = SUB_UNITS.get(name.strip().lower())
    if unit is None:
        raise InvalidInputError(
            f'Unknown sub-unit: "{name}"',
            suggestion=f"Known sub-units: {', '.join(sorted(SUB_UNITS))}",
        )
    return unit
