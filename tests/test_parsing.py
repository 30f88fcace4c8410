"""
test_parsing.py — String grammars and currency reference data
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cent import (
    BTC, CNY, EUR, JPY, USD, USDC,
    Currency,
    ErrorCode,
    InvalidInputError,
    Money,
    ParseError,
    get_currency,
    register_currency,
)
from cent import currency as currency_module
from cent.currency import PRIMARY_SYMBOL_MAP, get_sub_unit, primary_symbol, registered_currencies
from cent.parsing import (
    is_fraction_string,
    parse_decimal,
    parse_fraction,
    parse_money_string,
    parse_number,
)


# ==============================================================================
# NUMBERS
# ==============================================================================

class TestParseNumber:

    @pytest.mark.parametrize("text, expected", [
        ("1,234,567.89", (123456789, 2)),
        ("−5", (-5, 0)),
        ("1.5e-7", (15, 8)),
        ("1e3", (1000, 0)),
        ("2.5E+2", (250, 0)),
        ("-0.1", (-1, 1)),
    ])
    def test_accepts(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", ["", "1,23", "12,3456", ",123", "e5", "1.2.3"])
    def test_rejects(self, text):
        with pytest.raises(ParseError):
            parse_number(text)

    def test_decimal_is_strict(self):
        assert parse_decimal("007.50") == (750, 2)
        with pytest.raises(ParseError):
            parse_decimal(" 1")
        with pytest.raises(ParseError):
            parse_decimal(1)


class TestParseFraction:

    def test_accepts(self):
        assert parse_fraction("3/4") == (3, 4)
        assert parse_fraction(" -22 /  7 ") == (-22, 7)

    def test_zero_denominator(self):
        with pytest.raises(ParseError) as exc:
            parse_fraction("1/0")
        assert "zero" in str(exc.value)

    def test_is_fraction_string(self):
        assert is_fraction_string("1/3")
        assert not is_fraction_string("0.5")
        assert not is_fraction_string(3)


# ==============================================================================
# MONEY STRINGS
# ==============================================================================

class TestParseMoneyString:

    @pytest.mark.parametrize("text, currency, mantissa, scale", [
        ("$99.99", USD, 9999, 2),
        ("99.99$", USD, 9999, 2),
        ("€ 5", EUR, 5, 0),
        ("5 €", EUR, 5, 0),
        ("−€5", EUR, -5, 0),
        ("-1,000.5 usd", USD, -10005, 1),
        ("¥1000", JPY, 1000, 0),
        ("₿0.5", BTC, 5, 1),
        ("CNY 12.30", CNY, 1230, 2),
        ("1.5e-3 BTC", BTC, 15, 4),
        ("USDC 1.25", USDC, 125, 2),
    ])
    def test_accepts(self, text, currency, mantissa, scale):
        assert parse_money_string(text) == (currency, mantissa, scale)

    @pytest.mark.parametrize("text, code", [
        ("", ErrorCode.INVALID_MONEY_STRING),
        ("$", ErrorCode.INVALID_MONEY_STRING),
        ("-$-5", ErrorCode.INVALID_MONEY_STRING),
        ("12.5", ErrorCode.INVALID_MONEY_STRING),
        ("15%", ErrorCode.INVALID_MONEY_STRING),
        ("$1.2.3", ErrorCode.INVALID_MONEY_STRING),
        ("ABC 1", ErrorCode.UNKNOWN_CURRENCY),
        ("1 zzz", ErrorCode.UNKNOWN_CURRENCY),
    ])
    def test_rejects(self, text, code):
        with pytest.raises(ParseError) as exc:
            parse_money_string(text)
        assert exc.value.code is code
        assert exc.value.input == text


# ==============================================================================
# CURRENCIES
# ==============================================================================

@pytest.fixture
def registry():
    """Undo currency registrations made by a test."""
    codes = dict(currency_module._REGISTRY)
    symbols = dict(PRIMARY_SYMBOL_MAP)
    yield
    currency_module._REGISTRY.clear()
    currency_module._REGISTRY.update(codes)
    PRIMARY_SYMBOL_MAP.clear()
    PRIMARY_SYMBOL_MAP.update(symbols)


class TestCurrency:

    def test_lookup_is_case_insensitive(self):
        assert get_currency("btc") is BTC
        assert get_currency(" eur ") is EUR
        assert get_currency(USD) is USD

    def test_unknown(self):
        with pytest.raises(ParseError) as exc:
            get_currency("XYZ")
        assert exc.value.code is ErrorCode.UNKNOWN_CURRENCY

    def test_wrong_type(self):
        with pytest.raises(InvalidInputError):
            get_currency(840)

    def test_descriptor(self):
        assert USD.multiplier == 100
        assert JPY.multiplier == 1
        assert str(BTC) == "BTC"
        assert USD.to_dict()["decimals"] == "2"

    def test_invalid_decimals(self):
        with pytest.raises(InvalidInputError):
            Currency("BAD", "Bad", -1)

    def test_primary_symbol(self):
        assert primary_symbol(USD) == "$"
        assert primary_symbol(JPY) == "¥"
        assert primary_symbol(CNY) is None
        assert primary_symbol(USDC) is None

    def test_registered_currencies(self):
        codes = [c.code for c in registered_currencies()]
        assert codes == sorted(codes)
        assert {"USD", "EUR", "BTC", "ETH"} <= set(codes)

    def test_register_currency(self, registry):
        tst = register_currency(Currency("TST", "Test Dollar", 3, "T$"), primary_symbol=True)
        assert get_currency("tst") is tst
        m = Money.parse("T$1.5")
        assert m.currency is tst
        assert str(m) == "T$1.500"

    def test_register_without_symbol_ownership(self, registry):
        register_currency(Currency("TSU", "Test Unit", 2, "$"))
        assert Money.parse("$1").currency is USD
        assert str(Money.parse("TSU 1")) == "1.00 TSU"


class TestSubUnits:

    @pytest.mark.parametrize("name, code, decimals", [
        ("sat", "BTC", 8),
        ("SATS", "BTC", 8),
        ("msat", "BTC", 11),
        ("wei", "ETH", 18),
        ("gwei", "ETH", 9),
        ("lamports", "SOL", 9),
        ("pence", "GBP", 2),
    ])
    def test_known(self, name, code, decimals):
        unit = get_sub_unit(name)
        assert (unit.currency.code, unit.decimals) == (code, decimals)

    def test_unknown(self):
        with pytest.raises(InvalidInputError) as exc:
            get_sub_unit("doubloon")
        assert "sat" in exc.value.suggestion


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
