"""Read-side repositories feeding the pricing engine."""

from __future__ import annotations

import datetime
from typing import Protocol
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rental_pricing.models import Coupon, CouponUsage, Room, SeasonalRate
from rental_pricing.services.pricing_types import (
    CouponSnapshot,
    RoomSnapshot,
    SeasonalRateSnapshot,
)


class RateRepository(Protocol):
    """Source of room base prices and seasonal rates."""

    async def get_room(self, tenant_id: UUID, room_id: UUID) -> RoomSnapshot | None:
        ...

    async def list_overlapping_rates(
        self,
        tenant_id: UUID,
        room_id: UUID,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> list[SeasonalRateSnapshot]:
        ...


class CouponRepository(Protocol):
    """Source of coupon definitions and per-customer redemption counts."""

    async def find_by_code(self, tenant_id: UUID, code: str) -> CouponSnapshot | None:
        ...

    async def count_customer_uses(self, coupon_id: UUID, customer_email: str) -> int:
        ...


def room_snapshot(room: Room) -> RoomSnapshot:
    return RoomSnapshot(
        id=room.id,
        tenant_id=room.tenant_id,
        name=room.name,
        base_price_per_night=room.base_price_per_night,
        currency=room.currency,
        min_stay_nights=room.min_stay_nights,
        max_stay_nights=room.max_stay_nights,
    )


def rate_snapshot(rate: SeasonalRate) -> SeasonalRateSnapshot:
    return SeasonalRateSnapshot(
        id=rate.id,
        room_id=rate.room_id,
        name=rate.name,
        start_date=rate.start_date,
        end_date=rate.end_date,
        price_per_night=rate.price_per_night,
        priority=rate.priority,
        min_nights=rate.min_nights,
        created_at=rate.created_at,
    )


def coupon_snapshot(coupon: Coupon) -> CouponSnapshot:
    return CouponSnapshot(
        id=coupon.id,
        tenant_id=coupon.tenant_id,
        code=coupon.code,
        name=coupon.name,
        description=coupon.description,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        is_active=coupon.is_active,
        valid_from=coupon.valid_from,
        valid_until=coupon.valid_until,
        applicable_room_ids=tuple(str(rid) for rid in coupon.applicable_room_ids or ()),
        max_uses=coupon.max_uses,
        current_uses=coupon.current_uses,
        max_uses_per_customer=coupon.max_uses_per_customer,
        min_booking_amount=coupon.min_booking_amount,
        min_nights=coupon.min_nights,
    )


class SqlRateRepository:
    """:class:`RateRepository` backed by the SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_room(self, tenant_id: UUID, room_id: UUID) -> RoomSnapshot | None:
        stmt: Select[tuple[Room]] = select(Room).where(
            Room.id == room_id, Room.tenant_id == tenant_id
        )
        room = (await self._session.execute(stmt)).scalar_one_or_none()
        if room is None:
            return None
        return room_snapshot(room)

    async def list_overlapping_rates(
        self,
        tenant_id: UUID,
        room_id: UUID,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> list[SeasonalRateSnapshot]:
        # Stay is [start_date, end_date); rates are inclusive on both ends.
        stmt: Select[tuple[SeasonalRate]] = (
            select(SeasonalRate)
            .where(
                SeasonalRate.room_id == room_id,
                SeasonalRate.tenant_id == tenant_id,
                SeasonalRate.start_date < end_date,
                SeasonalRate.end_date >= start_date,
            )
            .order_by(SeasonalRate.priority.desc(), SeasonalRate.start_date.asc())
        )
        result = await self._session.execute(stmt)
        return [rate_snapshot(rate) for rate in result.scalars().all()]


class SqlCouponRepository:
    """:class:`CouponRepository` backed by the SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_code(self, tenant_id: UUID, code: str) -> CouponSnapshot | None:
        normalized = code.strip().lower()
        if not normalized:
            return None
        stmt: Select[tuple[Coupon]] = select(Coupon).where(
            Coupon.tenant_id == tenant_id, func.lower(Coupon.code) == normalized
        )
        coupon = (await self._session.execute(stmt)).scalars().first()
        if coupon is None:
            return None
        return coupon_snapshot(coupon)

    async def count_customer_uses(self, coupon_id: UUID, customer_email: str) -> int:
        stmt = select(func.count(CouponUsage.id)).where(
            CouponUsage.coupon_id == coupon_id,
            func.lower(CouponUsage.customer_email) == customer_email.strip().lower(),
        )
        count = await self._session.scalar(stmt)
        return int(count or 0)
