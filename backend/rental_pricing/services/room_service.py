"""Manage rooms and their seasonal rates."""
from __future__ import annotations

import uuid

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rental_pricing.core.config import get_settings
from rental_pricing.models import Room, SeasonalRate
from rental_pricing.schemas.room import (
    RoomCreate,
    RoomUpdate,
    SeasonalRateCreate,
    SeasonalRateUpdate,
)
from rental_pricing.services.errors import (
    PricingInputError,
    RoomNotFoundError,
    SeasonalRateNotFoundError,
)

_REQUIRED_RATE_FIELDS = frozenset(
    {"name", "start_date", "end_date", "price_per_night", "priority"}
)
_REQUIRED_ROOM_FIELDS = frozenset(
    {"name", "base_price_per_night", "currency", "min_stay_nights", "is_active"}
)


async def get_room(
    session: AsyncSession, *, tenant_id: uuid.UUID, room_id: uuid.UUID
) -> Room:
    room = await session.get(Room, room_id)
    if room is None or room.tenant_id != tenant_id:
        raise RoomNotFoundError("Room not found")
    return room


async def list_rooms(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    is_active: bool | None = None,
    search: str | None = None,
) -> list[Room]:
    stmt: Select[tuple[Room]] = select(Room).where(Room.tenant_id == tenant_id)
    if is_active is not None:
        stmt = stmt.where(Room.is_active.is_(is_active))
    if search and search.strip():
        stmt = stmt.where(func.lower(Room.name).like(f"%{search.strip().lower()}%"))
    stmt = stmt.order_by(Room.name.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_room(
    session: AsyncSession, *, tenant_id: uuid.UUID, payload: RoomCreate
) -> Room:
    data = payload.model_dump()
    data["currency"] = (data.get("currency") or get_settings().default_currency).upper()
    room = Room(tenant_id=tenant_id, **data)
    session.add(room)
    await session.commit()
    await session.refresh(room)
    return room


async def update_room(
    session: AsyncSession, *, room: Room, payload: RoomUpdate
) -> Room:
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key not in _REQUIRED_ROOM_FIELDS
    }
    if "currency" in changes:
        changes["currency"] = changes["currency"].upper()
    min_stay = changes.get("min_stay_nights", room.min_stay_nights)
    max_stay = changes.get("max_stay_nights", room.max_stay_nights)
    if max_stay is not None and max_stay < min_stay:
        raise PricingInputError("max_stay_nights must be >= min_stay_nights")
    for key, value in changes.items():
        setattr(room, key, value)
    await session.commit()
    await session.refresh(room)
    return room


async def delete_room(session: AsyncSession, *, room: Room, hard: bool = False) -> None:
    """Deactivate the room, or remove it with its seasonal rates when ``hard`` is set."""
    if hard:
        await session.delete(room)
    else:
        room.is_active = False
    await session.commit()


async def list_rates(
    session: AsyncSession, *, tenant_id: uuid.UUID, room_id: uuid.UUID
) -> list[SeasonalRate]:
    await get_room(session, tenant_id=tenant_id, room_id=room_id)
    stmt: Select[tuple[SeasonalRate]] = (
        select(SeasonalRate)
        .where(
            SeasonalRate.room_id == room_id,
            SeasonalRate.tenant_id == tenant_id,
        )
        .order_by(SeasonalRate.start_date.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_rate(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    room_id: uuid.UUID,
    payload: SeasonalRateCreate,
) -> SeasonalRate:
    await get_room(session, tenant_id=tenant_id, room_id=room_id)
    rate = SeasonalRate(tenant_id=tenant_id, room_id=room_id, **payload.model_dump())
    session.add(rate)
    await session.commit()
    await session.refresh(rate)
    return rate


async def get_rate(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    room_id: uuid.UUID,
    rate_id: uuid.UUID,
) -> SeasonalRate:
    rate = await session.get(SeasonalRate, rate_id)
    if rate is None or rate.room_id != room_id or rate.tenant_id != tenant_id:
        raise SeasonalRateNotFoundError("Seasonal rate not found")
    return rate


async def update_rate(
    session: AsyncSession,
    *,
    rate: SeasonalRate,
    payload: SeasonalRateUpdate,
) -> SeasonalRate:
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key not in _REQUIRED_RATE_FIELDS
    }
    start_date = changes.get("start_date", rate.start_date)
    end_date = changes.get("end_date", rate.end_date)
    if end_date < start_date:
        raise PricingInputError("end_date must not be before start_date")
    for key, value in changes.items():
        setattr(rate, key, value)
    await session.commit()
    await session.refresh(rate)
    return rate


async def delete_rate(session: AsyncSession, *, rate: SeasonalRate) -> None:
    await session.delete(rate)
    await session.commit()
