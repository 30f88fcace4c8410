"""
test_percentages.py — Percentage arithmetic on Money

Covers percentage strings in add/subtract/multiply and the tax-style
extract/remove/split helpers, including the rule that base + portion
always reconstructs the original amount.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cent import (
    DivisionError,
    ErrorCode,
    FixedPointDecimal,
    InvalidInputError,
    Money,
    ParseError,
    RoundingMode,
    USD,
)
from cent.parsing import is_percentage_string, parse_percentage


class TestPercentageParsing:

    @pytest.mark.parametrize("text, expected", [
        ("8.25%", (825, 4)),
        ("20 %", (20, 2)),
        ("20percent", (20, 2)),
        ("20 PERCENT", (20, 2)),
        ("-10%", (-10, 2)),
        ("  100%  ", (100, 2)),
    ])
    def test_parse(self, text, expected):
        assert parse_percentage(text) == expected

    @pytest.mark.parametrize("text", ["8", "$8", "%8", "8%%", "eight%", "1.%"])
    def test_not_a_percentage(self, text):
        assert parse_percentage(text) is None
        assert not is_percentage_string(text)


class TestAddSubtract:

    def test_add_percentage(self):
        assert Money.parse("$100.00").add("8.25%") == Money.parse("$108.25")
        assert str(Money.parse("$100.00").add("8.25%")) == "$108.25"

    def test_add_negative_percentage(self):
        assert str(Money.parse("$100.00").add("-10%")) == "$90.00"

    @pytest.mark.parametrize("text", ["20percent", "20 %", "20 PERCENT"])
    def test_percentage_spellings(self, text):
        assert Money.parse("$100.00").add(text) == Money.parse("$120")

    def test_add_percentage_is_exact(self):
        result = Money.parse("$19.99").add("8.25%")
        assert result.amount == FixedPointDecimal.parse("21.639175")

    def test_add_percentage_with_mode(self):
        assert str(Money.parse("$19.99").add("8.25%", RoundingMode.HALF_UP)) == "$21.64"

    def test_subtract_percentage(self):
        assert Money.parse("$100.00").subtract("10%") == Money.parse("$90.00")
        assert Money.parse("$80.00").subtract("12.5%") == Money.parse("$70.00")

    def test_multiply_percentage(self):
        assert str(Money.parse("$80.00").multiply("15%")) == "$12.00"


class TestExtractRemove:

    def test_vat_in_gross_price(self):
        gross = Money.parse("$121.00")
        assert str(gross.extract_percent("21%", RoundingMode.HALF_UP)) == "$21.00"
        assert str(gross.remove_percent("21%", RoundingMode.HALF_UP)) == "$100.00"

    def test_percent_forms(self):
        gross = Money.parse("$121.00")
        mode = RoundingMode.HALF_UP
        assert gross.extract_percent(21, mode) == Money.parse("$21")
        assert gross.extract_percent("21", mode) == Money.parse("$21")
        assert gross.extract_percent(FixedPointDecimal(21), mode) == Money.parse("$21")

    def test_divisor_gate_applies(self):
        # 1.21 has the prime factor 11, even though $121.00 / 1.21 terminates
        with pytest.raises(DivisionError) as exc:
            Money.parse("$121.00").remove_percent("21%")
        assert exc.value.code is ErrorCode.DIVISION_REQUIRES_ROUNDING

    def test_two_and_five_rate_needs_no_mode(self):
        gross = Money.parse("$125.00")
        assert gross.remove_percent("25%") == Money.parse("$100.00")
        assert gross.extract_percent("25%") == Money.parse("$25.00")

    def test_base_is_rounded_before_the_portion(self):
        # 15.03 / 1.2 = 12.525 exactly, a tie
        base, vat = Money.parse("$15.03").split_percent("20%", RoundingMode.HALF_UP)
        assert base == Money.parse("$12.53")
        assert vat == Money.parse("$2.50")
        base, vat = Money.parse("$15.03").split_percent("20%", RoundingMode.HALF_DOWN)
        assert base == Money.parse("$12.52")
        assert vat == Money.parse("$2.51")

    def test_exact_rate_keeps_sub_units(self):
        # 1.6 is 2**4 / 10, so the base stays exact whatever the mode
        base = Money.parse("$1.00").remove_percent("60%", RoundingMode.HALF_UP)
        assert base.amount == FixedPointDecimal.parse("0.625")

    def test_inexact_requires_mode(self):
        with pytest.raises(DivisionError) as exc:
            Money.parse("$100.00").extract_percent("21%")
        assert exc.value.code is ErrorCode.DIVISION_REQUIRES_ROUNDING

    def test_inexact_with_mode(self):
        total = Money.parse("$100.00")
        assert str(total.extract_percent("21%", RoundingMode.HALF_UP)) == "$17.36"
        assert str(total.remove_percent("21%", RoundingMode.HALF_UP)) == "$82.64"

    def test_split_reconstructs_total(self):
        total = Money.parse("$100.00")
        base, portion = total.split_percent("21%", RoundingMode.HALF_EVEN)
        assert base + portion == total

    def test_zero_percent(self):
        base, portion = Money.parse("$50.00").split_percent("0%")
        assert base == Money.parse("$50.00")
        assert portion.is_zero()

    def test_bad_percentage(self):
        with pytest.raises(ParseError):
            Money.parse("$1").extract_percent("abc")
        with pytest.raises(InvalidInputError):
            Money.parse("$1").extract_percent(0.21)


class TestPercentageProperties:

    @given(
        minor=st.integers(min_value=-10 ** 9, max_value=10 ** 9),
        percent=st.integers(min_value=0, max_value=300),
        mode=st.sampled_from([RoundingMode.HALF_UP, RoundingMode.HALF_EVEN, RoundingMode.DOWN]),
    )
    @settings(max_examples=500)
    def test_remove_plus_extract_equals_total(self, minor, percent, mode):
        total = Money.of_minor(minor, USD)
        assert total.remove_percent(percent, mode) + total.extract_percent(percent, mode) == total

    @given(minor=st.integers(min_value=0, max_value=10 ** 9), percent=st.integers(min_value=0, max_value=100))
    @settings(max_examples=300)
    def test_add_then_remove_round_trips(self, minor, percent):
        base = Money.of_minor(minor, USD)
        gross = base.add(f"{percent}%")
        assert gross.remove_percent(percent, RoundingMode.HALF_UP) == base


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
