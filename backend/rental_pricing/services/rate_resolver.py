"""Resolve the effective nightly price of a stay from base and seasonal rates."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Iterator, Sequence
from decimal import Decimal

from rental_pricing.services.errors import PricingConfigurationError, PricingInputError
from rental_pricing.services.money import to_money
from rental_pricing.services.pricing_types import NightPrice, SeasonalRateSnapshot

logger = logging.getLogger(__name__)

_EPOCH = datetime.datetime.min.replace(tzinfo=datetime.UTC)


def stay_nights(
    start_date: datetime.date, end_date: datetime.date
) -> Iterator[datetime.date]:
    """Yield each charged night; the checkout day is excluded."""
    current = start_date
    while current < end_date:
        yield current
        current += datetime.timedelta(days=1)


def count_nights(start_date: datetime.date, end_date: datetime.date) -> int:
    ensure_valid_range(start_date, end_date)
    return (end_date - start_date).days


def ensure_valid_range(start_date: datetime.date, end_date: datetime.date) -> None:
    if end_date < start_date:
        raise PricingInputError("end_date must not be before start_date")


def _created_key(rate: SeasonalRateSnapshot) -> datetime.datetime:
    created = rate.created_at
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        # SQLite hands back naive timestamps that were stored as UTC.
        return created.replace(tzinfo=datetime.UTC)
    return created


def _precedence(rate: SeasonalRateSnapshot) -> tuple[int, int, float, str]:
    # Sorted ascending: highest priority, then narrowest range, then newest, then id.
    return (-rate.priority, rate.span_days, -_created_key(rate).timestamp(), str(rate.id))


def select_rate(
    day: datetime.date,
    rates: Iterable[SeasonalRateSnapshot],
    *,
    stay_length: int | None = None,
) -> SeasonalRateSnapshot | None:
    """Return the single seasonal rate that prices ``day``, if any."""
    candidates = [
        rate
        for rate in rates
        if rate.covers(day)
        and (
            rate.min_nights is None
            or stay_length is None
            or stay_length >= rate.min_nights
        )
    ]
    if not candidates:
        return None
    return min(candidates, key=_precedence)


def ensure_valid_prices(
    base_price: Decimal, rates: Iterable[SeasonalRateSnapshot]
) -> Decimal:
    """Return the rounded base price, rejecting negative stored prices."""
    base = to_money(base_price)
    if base < 0:
        logger.error("Negative base price %s configured for room pricing", base)
        raise PricingConfigurationError("Room base price cannot be negative")
    for rate in rates:
        if rate.price_per_night < 0:
            logger.error("Seasonal rate %s has negative price", rate.id)
            raise PricingConfigurationError(
                f"Seasonal rate {rate.name!r} has a negative price"
            )
    return base


def resolve_nights(
    *,
    base_price: Decimal,
    start_date: datetime.date,
    end_date: datetime.date,
    rates: Sequence[SeasonalRateSnapshot],
) -> list[NightPrice]:
    """Produce one :class:`NightPrice` per night in ``[start_date, end_date)``."""

    ensure_valid_range(start_date, end_date)
    base = ensure_valid_prices(base_price, rates)

    stay_length = (end_date - start_date).days
    nights: list[NightPrice] = []
    for day in stay_nights(start_date, end_date):
        rate = select_rate(day, rates, stay_length=stay_length)
        effective = to_money(rate.price_per_night) if rate is not None else base
        nights.append(
            NightPrice(
                date=day,
                base_price=base,
                effective_price=effective,
                seasonal_rate=rate,
            )
        )
    return nights
