#!/usr/bin/env python3
"""
cent_tour.py — A walk through cent

================================================================================
THE BUG
================================================================================

    >>> 0.1 + 0.2
    0.30000000000000004
    >>> 2026.0 / 12 * 12
    2025.9999999999998

Binary floating point cannot hold most decimal fractions, and division
silently rounds. For money both are unacceptable.

================================================================================
THE APPROACH
================================================================================

- Amounts are exact decimals (integer mantissa + scale), never float
- Division is exact when the result terminates, otherwise the caller names
  the rounding mode
- Splitting money never creates or loses a minor unit

================================================================================
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cent import (
    DivisionError,
    ExchangeRate,
    FixedPointDecimal,
    Money,
    RationalNumber,
    RoundingMode,
)


def banner(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)
    print()


def demonstrate_exact_numbers():
    banner("EXACT NUMBERS")

    print(">>> 0.1 + 0.2")
    print(f"{0.1 + 0.2}")
    print()

    a, b = FixedPointDecimal.parse("0.1"), FixedPointDecimal.parse("0.2")
    print(">>> FixedPointDecimal.parse('0.1') + FixedPointDecimal.parse('0.2')")
    print(f"{a + b}")
    print()

    ratio = RationalNumber.parse("1234/97328")
    print(f"1234/97328 in lowest terms: {ratio}")
    print(f"1/3 to 6 places (HALF_UP): {RationalNumber(1, 3).to_fixed_point(6, RoundingMode.HALF_UP)}")
    print()


def demonstrate_division():
    banner("DIVISION IS EXACT OR EXPLICIT")

    bill = Money.parse("$100.00")
    print(f"{bill} / 8 = {bill.divide(8)}")
    print()

    print(f">>> {bill}.divide(3)")
    try:
        bill.divide(3)
    except DivisionError as e:
        print(e.detailed())
    print()

    print(f"{bill} / 3 (HALF_UP) = {bill.divide(3, RoundingMode.HALF_UP)}")
    print(f"{bill} / 3 (CEILING) = {bill.divide(3, RoundingMode.CEILING)}")
    print()


def demonstrate_distribution():
    banner("DISTRIBUTION")

    budget = Money.of(2026, "EUR")
    monthly = budget.distribute(12)
    print(f"Budget: {budget}")
    for i, m in enumerate(monthly, 1):
        print(f"  Month {i:2d}: {m}")
    print(f"Sum of parts: {Money.sum(monthly)}  (equal: {Money.sum(monthly) == budget})")
    print()

    pot = Money.parse("$0.05")
    print(f"{pot} split 1:1 -> {[str(p) for p in pot.allocate([1, 1])]}")
    profit = Money.parse("$1000.00")
    print(f"{profit} split 70/20/10 -> {[str(p) for p in profit.allocate([70, 20, 10])]}")
    print()


def demonstrate_percentages():
    banner("PERCENTAGES")

    price = Money.parse("$100.00")
    print(f"{price} + 8.25% = {price.add('8.25%')}")
    print(f"{price} - 10%   = {price.subtract('10%')}")
    print()

    gross = Money.parse("$121.00")
    net, vat = gross.split_percent("21%", RoundingMode.HALF_UP)
    print(f"Gross {gross} at 21% VAT: net {net}, VAT {vat}")
    print(f"Invariant (net + vat == gross): {net + vat == gross}")
    print()


def demonstrate_exchange_rates():
    banner("EXCHANGE RATES")

    rate = ExchangeRate("USD", "EUR", "0.92", source="demo")
    print(rate)
    print(f"$100.00 -> {rate.convert(Money.parse('$100.00'))}")
    print(f"€10.00  -> {rate.convert(Money.parse('€10.00'), RoundingMode.HALF_EVEN)}")
    print(f"Inverse: {rate.invert()}")
    quote = rate.spread("1%")
    print(f"Bid {quote.bid.rate} / Ask {quote.ask.rate}")
    print()


def demonstrate_serialization():
    banner("SERIALIZATION")

    original = Money.parse("1.5 BTC")
    data = original.to_dict(compact=True)
    print(f"Original:   {original}")
    print(f"Serialized: {data}")
    restored = Money.from_dict(data)
    print(f"Restored:   {restored}  (equal: {original == restored})")
    print()
    print("Every numeric field is a string. No float ever reaches storage.")
    print()


def main():
    demonstrate_exact_numbers()
    demonstrate_division()
    demonstrate_distribution()
    demonstrate_percentages()
    demonstrate_exchange_rates()
    demonstrate_serialization()


if __name__ == "__main__":
    main()
