"""Monetary helpers.

Amounts are stored as floats on aggregates and computed as ``Decimal`` so that
rounding is exact: two places, half away from zero.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(amount) -> Decimal:
    if amount is None:
        return ZERO
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def round_money(amount) -> Decimal:
    """Round to cents, half away from zero (``ROUND_HALF_UP`` on Decimal)."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount, percentage) -> Decimal:
    return round_money(to_decimal(amount) * to_decimal(percentage) / Decimal(100))


def as_float(amount) -> float:
    return float(round_money(amount))
