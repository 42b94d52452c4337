"""Fixed-point helpers for currency amounts."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Final

MONEY_PLACES: Final = Decimal("0.01")
ZERO: Final = Decimal("0.00")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert without quantizing; floats go through ``str`` to avoid binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def to_money(value: Decimal | int | float | str) -> Decimal:
    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def to_str(value: Decimal) -> str:
    return f"{to_money(value):.2f}"


def sum_money(values) -> Decimal:
    """Sum exact decimal amounts and round once at the end."""
    return to_money(sum((to_decimal(value) for value in values), Decimal("0")))
