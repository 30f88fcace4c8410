"""
parsing.py — String grammars

Locale-agnostic parsers for the four textual inputs cent understands:

    decimal      "-12.50", ".5", "+3"
    fraction     "3/4", " -22 / 7 "
    percentage   "8.25%", "20 percent", "-10 %"
    money        "$99.99", "USD 10.00", "1.5 BTC", "-€5", "1,234.56 USD"

The parsers return plain integers (mantissa, scale / numerator, denominator)
so that the value types can be built on top of them without circular
imports. Nothing here ever goes through float.
"""

from __future__ import annotations
from typing import Optional
import re

from .currency import Currency, PRIMARY_SYMBOL_MAP, find_currency
from .errors import ErrorCode, ParseError


_DECIMAL_RE = re.compile(r"^([+-])?(?:(\d+)(?:\.(\d+))?|\.(\d+))$")
_SCIENTIFIC_RE = re.compile(r"^([+-])?(\d*)(?:\.(\d+))?[eE]([+-]?\d+)$")
_GROUPED_RE = re.compile(r"^\d{1,3}(?:,\d{3})+$")
_FRACTION_RE = re.compile(r"^\s*([+-]?\d+)\s*/\s*(\d+)\s*$")
_PERCENT_RE = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)\s*(?:%|percent)\s*$", re.IGNORECASE)
_CODE_PREFIX_RE = re.compile(r"^([A-Za-z]{2,6})\s*(.+)$")
_CODE_SUFFIX_RE = re.compile(r"^(.+?)\s*([A-Za-z]{2,6})$")

# Unicode minus sign is accepted wherever "-" is
_MINUS = ("-", "−")


def parse_decimal(text: str) -> tuple[int, int]:
    """
    Parse a plain decimal string into (mantissa, scale).

    Grammar: optional sign, digits, optional "." followed by digits
    (".5" is accepted, "5." and "1e3" are not).

    Raises:
        ParseError: on any other input
    """
    if not isinstance(text, str):
        raise ParseError(str(text), f"Expected a decimal string, got {type(text).__name__}")
    match = _DECIMAL_RE.match(text)
    if match is None:
        raise ParseError(
            text,
            f'Invalid number format: "{text}". Expected digits with an optional '
            f"sign and an optional decimal point.",
            code=ErrorCode.INVALID_NUMBER_FORMAT,
        )
    sign, whole, fraction, bare_fraction = match.groups()
    if bare_fraction is not None:
        whole, fraction = "0", bare_fraction
    fraction = fraction or ""
    mantissa = int(whole + fraction)
    return (-mantissa if sign == "-" else mantissa), len(fraction)


def parse_number(text: str) -> tuple[int, int]:
    """
    Parse a number as it appears inside money strings or float reprs.

    On top of parse_decimal() this accepts US thousands grouping
    ("1,234,567.89"), the unicode minus sign and scientific notation
    ("1.5e-7"). Exponents are applied to the integer mantissa, never
    through float.
    """
    cleaned = text.strip()
    if cleaned.startswith("−"):
        cleaned = "-" + cleaned[1:]

    scientific = _SCIENTIFIC_RE.match(cleaned)
    if scientific is not None:
        sign, whole, fraction, exponent = scientific.groups()
        fraction = fraction or ""
        if not whole and not fraction:
            raise ParseError(text, f'Invalid number format: "{text}"',
                             code=ErrorCode.INVALID_NUMBER_FORMAT)
        mantissa = int((whole or "0") + fraction)
        scale = len(fraction) - int(exponent)
        if scale < 0:
            mantissa *= 10 ** -scale
            scale = 0
        return (-mantissa if sign == "-" else mantissa), scale

    sign = ""
    if cleaned[:1] in ("+", "-"):
        sign, cleaned = cleaned[0], cleaned[1:]
    whole, dot, fraction = cleaned.partition(".")
    if "," in whole:
        if not _GROUPED_RE.match(whole):
            raise ParseError(text, f'Invalid comma grouping: "{text}"',
                             code=ErrorCode.INVALID_NUMBER_FORMAT)
        whole = whole.replace(",", "")
    return parse_decimal(sign + whole + dot + fraction)


def parse_fraction(text: str) -> tuple[int, int]:
    """
    Parse "p/q" into (p, q). Whitespace around either side is tolerated.

    Raises:
        ParseError: on non-integer parts, extra separators or q == 0
    """
    match = _FRACTION_RE.match(text) if isinstance(text, str) else None
    if match is None:
        raise ParseError(
            str(text),
            f"Invalid fraction format: \"{text}\". Expected 'numerator/denominator' "
            f"(e.g. '3/4', '-22/7').",
            code=ErrorCode.INVALID_NUMBER_FORMAT,
        )
    numerator, denominator = int(match.group(1)), int(match.group(2))
    if denominator == 0:
        raise ParseError(text, f'Denominator cannot be zero: "{text}"',
                         code=ErrorCode.INVALID_NUMBER_FORMAT)
    return numerator, denominator


def is_fraction_string(text: str) -> bool:
    return isinstance(text, str) and "/" in text


def parse_percentage(text: str) -> Optional[tuple[int, int]]:
    """
    Parse a percentage string into the (mantissa, scale) of its fraction.

    "8.25%" -> (825, 4), i.e. 0.0825. Returns None when `text` is not a
    percentage string at all, so callers can fall back to other grammars.
    """
    if not isinstance(text, str):
        return None
    match = _PERCENT_RE.match(text)
    if match is None:
        return None
    mantissa, scale = parse_decimal(match.group(1))
    return mantissa, scale + 2


def is_percentage_string(text: str) -> bool:
    return parse_percentage(text) is not None


def parse_money_string(text: str) -> tuple[Currency, int, int]:
    """
    Parse a currency-tagged amount into (currency, mantissa, scale).

    Accepted shapes, with optional whitespace between the parts:

        "$99.99"  "99.99$"  "USD 10.00"  "10.00 USD"  "-$5"  "$-5"

    Symbols are matched longest first, so "CA$" wins over "$". A symbol maps
    to its primary currency ("$" is USD). Percentage strings are rejected
    here: a "%"-suffixed token is never a money literal.

    Raises:
        ParseError: INVALID_MONEY_STRING or UNKNOWN_CURRENCY
    """
    if not isinstance(text, str) or not text.strip():
        raise ParseError(str(text), "Cannot parse an empty money string",
                         code=ErrorCode.INVALID_MONEY_STRING)
    if is_percentage_string(text):
        raise ParseError(
            text,
            f'"{text}" is a percentage, not a money amount',
            code=ErrorCode.INVALID_MONEY_STRING,
            suggestion='Use add("8%") / multiply("8%") for percentage arithmetic.',
        )

    body = text.strip()
    negative = False
    if body[:1] in _MINUS:
        negative, body = True, body[1:].lstrip()

    currency, number = _split_symbol(body)
    if currency is None:
        currency, number = _split_code(text, body)
    if currency is None:
        raise ParseError(
            text,
            f'Cannot find a currency symbol or code in "{text}"',
            code=ErrorCode.INVALID_MONEY_STRING,
            example='Money.parse("$10.00") or Money.parse("10.00 USD")',
        )

    number = number.strip()
    if negative and number[:1] in _MINUS + ("+",):
        raise ParseError(text, f'Duplicate sign in "{text}"',
                         code=ErrorCode.INVALID_MONEY_STRING)
    try:
        mantissa, scale = parse_number(number)
    except ParseError as e:
        raise ParseError(
            text,
            f'Invalid amount in money string "{text}": {e.message}',
            code=ErrorCode.INVALID_MONEY_STRING,
        ) from e
    return currency, (-mantissa if negative else mantissa), scale


def _split_symbol(body: str) -> tuple[Optional[Currency], str]:
    for symbol in sorted(PRIMARY_SYMBOL_MAP, key=len, reverse=True):
        if body.startswith(symbol):
            return PRIMARY_SYMBOL_MAP[symbol], body[len(symbol):]
        if body.endswith(symbol):
            return PRIMARY_SYMBOL_MAP[symbol], body[: -len(symbol)]
    return None, body


def _split_code(text: str, body: str) -> tuple[Optional[Currency], str]:
    for pattern, code_group, number_group in (
        (_CODE_PREFIX_RE, 1, 2),
        (_CODE_SUFFIX_RE, 2, 1),
    ):
        match = pattern.match(body)
        if match is None:
            continue
        code = match.group(code_group)
        currency = find_currency(code)
        if currency is None:
            raise ParseError(
                text,
                f'Unsupported currency: "{code.upper()}"',
                code=ErrorCode.UNKNOWN_CURRENCY,
            )
        return currency, match.group(number_group)
    return None, body
