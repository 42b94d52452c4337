"""Tests for per-night overrides and stay totals."""

from __future__ import annotations

import datetime
from decimal import Decimal

import pytest

from rental_pricing.services import pricing_aggregator
from rental_pricing.services.errors import PricingInputError
from rental_pricing.services.pricing_types import NightPrice

FIRST = datetime.date(2025, 4, 17)


def _nights(*prices: str) -> list[NightPrice]:
    return [
        NightPrice(
            date=FIRST + datetime.timedelta(days=offset),
            base_price=Decimal("1000.00"),
            effective_price=Decimal(price),
        )
        for offset, price in enumerate(prices)
    ]


def test_total_is_sum_of_resolved_prices() -> None:
    breakdown, total = pricing_aggregator.aggregate(_nights("1000.00", "1500.00", "1000.00"))
    assert total == Decimal("3500.00")
    assert all(night.override_price is None for night in breakdown)


def test_override_replaces_charged_price_only() -> None:
    nights = _nights("1000.00", "1500.00", "1000.00")
    second = FIRST + datetime.timedelta(days=1)
    breakdown, total = pricing_aggregator.aggregate(nights, {second: "1200"})

    assert total == Decimal("3200.00")
    assert breakdown[1].override_price == Decimal("1200.00")
    assert breakdown[1].effective_price == Decimal("1500.00")
    assert breakdown[1].charged_price == Decimal("1200.00")
    assert nights[1].override_price is None


def test_removing_override_restores_resolved_price() -> None:
    nights = _nights("1000.00", "1500.00")
    second = FIRST + datetime.timedelta(days=1)
    overridden = pricing_aggregator.apply_overrides(nights, {second: Decimal("10")})
    reverted = pricing_aggregator.apply_overrides(overridden, {})
    assert reverted[1].charged_price == Decimal("1500.00")
    assert pricing_aggregator.total_for(reverted) == Decimal("2500.00")


def test_overrides_are_idempotent() -> None:
    nights = _nights("1000.00", "1500.00")
    overrides = {FIRST: Decimal("800.00")}
    once = pricing_aggregator.apply_overrides(nights, overrides)
    twice = pricing_aggregator.apply_overrides(once, overrides)
    assert once == twice


def test_override_outside_stay_is_ignored() -> None:
    nights = _nights("1000.00")
    _, total = pricing_aggregator.aggregate(
        nights, {FIRST + datetime.timedelta(days=10): Decimal("1")}
    )
    assert total == Decimal("1000.00")


def test_zero_override_is_allowed() -> None:
    _, total = pricing_aggregator.aggregate(_nights("1000.00", "1000.00"), {FIRST: 0})
    assert total == Decimal("1000.00")


def test_negative_override_is_rejected() -> None:
    with pytest.raises(PricingInputError):
        pricing_aggregator.apply_overrides(_nights("1000.00"), {FIRST: Decimal("-1")})


def test_empty_stay_totals_zero() -> None:
    assert pricing_aggregator.aggregate([]) == ([], Decimal("0.00"))


def test_total_rounds_once_to_cents() -> None:
    nights = _nights("333.335", "333.335")
    assert pricing_aggregator.total_for(nights) == Decimal("666.67")
