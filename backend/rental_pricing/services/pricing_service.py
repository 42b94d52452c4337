"""Pricing engine facade: stay quotes and coupon quotes."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Mapping
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rental_pricing.core.config import get_settings
from rental_pricing.services import pricing_aggregator, rate_resolver
from rental_pricing.services.coupon_validator import CouponValidator
from rental_pricing.services.discount_calculator import calculate_discount
from rental_pricing.services.errors import PricingInputError, RoomNotFoundError
from rental_pricing.services.money import ZERO, to_money
from rental_pricing.services.pricing_types import (
    CouponContext,
    CouponValidation,
    NightPrice,
    PricingResult,
    RoomSnapshot,
)
from rental_pricing.services.repositories import (
    CouponRepository,
    RateRepository,
    SqlCouponRepository,
    SqlRateRepository,
)

logger = logging.getLogger(__name__)


def _plural(count: int) -> str:
    return f"{count} night{'s' if count != 1 else ''}"


def stay_warnings(room: RoomSnapshot, nights: int) -> list[str]:
    """Advisory min/max stay messages; staff may still book past them."""

    if nights <= 0:
        return []
    warnings: list[str] = []
    if nights < room.min_stay_nights:
        warnings.append(
            f"This room requires a minimum stay of {_plural(room.min_stay_nights)}. "
            f"You selected {_plural(nights)}."
        )
    if room.max_stay_nights and nights > room.max_stay_nights:
        warnings.append(
            f"This room has a maximum stay of {_plural(room.max_stay_nights)}. "
            f"You selected {_plural(nights)}."
        )
    return warnings


class PricingEngine:
    """Compose rate resolution, aggregation, coupon checks and discounts.

    Every operation is a read: nothing here reserves a coupon redemption or
    writes a price. Repositories are injected so the engine can run against
    in-memory fakes.
    """

    def __init__(
        self,
        rates: RateRepository,
        coupons: CouponRepository,
        *,
        max_nights: int | None = None,
    ) -> None:
        self._rates = rates
        self._coupons = coupons
        self._validator = CouponValidator(coupons)
        self._max_nights = max_nights

    async def _load_room(self, tenant_id: UUID, room_id: UUID) -> RoomSnapshot:
        room = await self._rates.get_room(tenant_id, room_id)
        if room is None:
            raise RoomNotFoundError("Room not found")
        return room

    async def quote_price(
        self,
        tenant_id: UUID,
        room_id: UUID,
        start_date: datetime.date,
        end_date: datetime.date,
        *,
        overrides: Mapping[datetime.date, Decimal | str | int] | None = None,
    ) -> PricingResult:
        """Price every night of ``[start_date, end_date)`` for a room."""

        nights_count = rate_resolver.count_nights(start_date, end_date)
        if self._max_nights is not None and nights_count > self._max_nights:
            raise PricingInputError(
                f"Stays longer than {self._max_nights} nights cannot be quoted"
            )

        room = await self._load_room(tenant_id, room_id)
        rates = []
        if nights_count:
            rates = await self._rates.list_overlapping_rates(
                tenant_id, room_id, start_date, end_date
            )
        resolved = rate_resolver.resolve_nights(
            base_price=room.base_price_per_night,
            start_date=start_date,
            end_date=end_date,
            rates=rates,
        )
        breakdown, total = pricing_aggregator.aggregate(resolved, overrides)
        return PricingResult(
            room_id=room.id,
            start_date=start_date,
            end_date=end_date,
            nights=breakdown,
            total_amount=total,
            currency=room.currency,
            warnings=stay_warnings(room, nights_count),
        )

    async def quote_night(
        self, tenant_id: UUID, room_id: UUID, day: datetime.date
    ) -> tuple[RoomSnapshot, NightPrice]:
        """Effective price of a single date, ignoring stay-length conditions."""

        room = await self._load_room(tenant_id, room_id)
        rates = await self._rates.list_overlapping_rates(
            tenant_id, room_id, day, day + datetime.timedelta(days=1)
        )
        base = rate_resolver.ensure_valid_prices(room.base_price_per_night, rates)
        rate = rate_resolver.select_rate(day, rates)
        effective = to_money(rate.price_per_night) if rate is not None else base
        return room, NightPrice(
            date=day, base_price=base, effective_price=effective, seasonal_rate=rate
        )

    async def validate_coupon(
        self,
        tenant_id: UUID,
        code: str | None,
        context: CouponContext,
    ) -> CouponValidation:
        """Check a code against ``context`` and quote its discount when eligible."""

        coupon, errors = await self._validator.validate(tenant_id, code, context)
        if coupon is None or errors:
            return CouponValidation.rejected(errors)

        subtotal = to_money(context.subtotal) if context.subtotal is not None else ZERO
        nights = context.nights if context.nights is not None else 1
        discount = calculate_discount(coupon, subtotal=subtotal, nights=nights)
        return CouponValidation.accepted(
            coupon, discount_amount=discount, subtotal=subtotal
        )


def engine_for_session(session: AsyncSession) -> PricingEngine:
    """Build an engine reading from the given database session."""
    settings = get_settings()
    return PricingEngine(
        SqlRateRepository(session),
        SqlCouponRepository(session),
        max_nights=settings.max_quote_nights,
    )
