"""Decimal helpers for monetary amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

PRECISION = Decimal("0.0001")  # 4 decimal places for internal calculations
OUTPUT_PRECISION = Decimal("0.01")  # 2 decimal places for persistence

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored amount (Decimal, int, float, str or None) to Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from expanding to binary noise
    return Decimal(str(value))


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(OUTPUT_PRECISION, rounding=ROUND_HALF_UP)


def round_internal(amount: Decimal) -> Decimal:
    """Round amount to the internal 4 decimal places."""
    return amount.quantize(PRECISION, rounding=ROUND_HALF_UP)


def sum_amounts(records: Iterable[Any]) -> Decimal:
    """Sum the ``amount`` attribute of each record."""
    total = ZERO
    for record in records:
        total += to_decimal(record.amount)
    return total
