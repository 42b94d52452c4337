"""Apply manual per-night overrides and total a resolved stay."""

from __future__ import annotations

import datetime
from collections.abc import Mapping, Sequence
from dataclasses import replace
from decimal import Decimal

from rental_pricing.services.errors import PricingInputError
from rental_pricing.services.money import sum_money, to_money
from rental_pricing.services.pricing_types import NightPrice


def apply_overrides(
    nights: Sequence[NightPrice],
    overrides: Mapping[datetime.date, Decimal | str | int] | None = None,
) -> list[NightPrice]:
    """Return copies of ``nights`` carrying the admin override for each date.

    The resolved ``effective_price``, ``base_price`` and ``seasonal_rate`` are
    left untouched. Overrides for dates outside the stay are ignored, and a
    night without an entry in ``overrides`` reverts to its resolved price.
    """

    overrides = overrides or {}
    adjusted: list[NightPrice] = []
    for night in nights:
        raw = overrides.get(night.date)
        override = None
        if raw is not None:
            override = to_money(raw)
            if override < 0:
                raise PricingInputError(
                    f"Override for {night.date.isoformat()} cannot be negative"
                )
        adjusted.append(replace(night, override_price=override))
    return adjusted


def total_for(nights: Sequence[NightPrice]) -> Decimal:
    """Sum the charged price of every night to the cent."""
    return sum_money(night.charged_price for night in nights)


def aggregate(
    nights: Sequence[NightPrice],
    overrides: Mapping[datetime.date, Decimal | str | int] | None = None,
) -> tuple[list[NightPrice], Decimal]:
    breakdown = apply_overrides(nights, overrides)
    return breakdown, total_for(breakdown)
