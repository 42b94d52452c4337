"""Room, seasonal rate and price lookup endpoints."""

from __future__ import annotations

import datetime
import uuid

from fastapi import APIRouter, HTTPException, Query, status

from rental_pricing.api.deps import DbSession, Engine, TenantId
from rental_pricing.schemas.pricing import (
    RoomNightPriceRead,
    RoomPricesRead,
    SeasonalRateRef,
)
from rental_pricing.schemas.room import (
    RoomCreate,
    RoomRead,
    RoomUpdate,
    SeasonalRateCreate,
    SeasonalRateRead,
    SeasonalRateUpdate,
)
from rental_pricing.services import room_service
from rental_pricing.services.errors import (
    PricingInputError,
    RoomNotFoundError,
    SeasonalRateNotFoundError,
)

router = APIRouter()


def _parse_date(raw: str, field: str) -> datetime.date:
    try:
        return datetime.date.fromisoformat(raw)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field} must be a YYYY-MM-DD date",
        ) from exc


@router.get("", response_model=list[RoomRead], summary="List rooms")
async def list_rooms(
    tenant_id: TenantId,
    session: DbSession,
    is_active: bool | None = None,
    search: str | None = None,
) -> list[RoomRead]:
    rooms = await room_service.list_rooms(
        session, tenant_id=tenant_id, is_active=is_active, search=search
    )
    return [RoomRead.model_validate(room) for room in rooms]


@router.post(
    "",
    response_model=RoomRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create room",
)
async def create_room(
    payload: RoomCreate,
    tenant_id: TenantId,
    session: DbSession,
) -> RoomRead:
    room = await room_service.create_room(session, tenant_id=tenant_id, payload=payload)
    return RoomRead.model_validate(room)


@router.get("/{room_id}", response_model=RoomRead, summary="Get room")
async def get_room(
    room_id: uuid.UUID,
    tenant_id: TenantId,
    session: DbSession,
) -> RoomRead:
    try:
        room = await room_service.get_room(session, tenant_id=tenant_id, room_id=room_id)
    except RoomNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return RoomRead.model_validate(room)


@router.put("/{room_id}", response_model=RoomRead, summary="Update room")
async def update_room(
    room_id: uuid.UUID,
    payload: RoomUpdate,
    tenant_id: TenantId,
    session: DbSession,
) -> RoomRead:
    try:
        room = await room_service.get_room(session, tenant_id=tenant_id, room_id=room_id)
        updated = await room_service.update_room(session, room=room, payload=payload)
    except RoomNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except PricingInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return RoomRead.model_validate(updated)


@router.delete(
    "/{room_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate or delete room",
)
async def delete_room(
    room_id: uuid.UUID,
    tenant_id: TenantId,
    session: DbSession,
    hard: bool = False,
) -> None:
    try:
        room = await room_service.get_room(session, tenant_id=tenant_id, room_id=room_id)
    except RoomNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    await room_service.delete_room(session, room=room, hard=hard)
    return None


@router.get(
    "/{room_id}/rates",
    response_model=list[SeasonalRateRead],
    summary="List seasonal rates",
)
async def list_seasonal_rates(
    room_id: uuid.UUID,
    tenant_id: TenantId,
    session: DbSession,
) -> list[SeasonalRateRead]:
    try:
        rates = await room_service.list_rates(
            session, tenant_id=tenant_id, room_id=room_id
        )
    except RoomNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return [SeasonalRateRead.model_validate(rate) for rate in rates]


@router.post(
    "/{room_id}/rates",
    response_model=SeasonalRateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create seasonal rate",
)
async def create_seasonal_rate(
    room_id: uuid.UUID,
    payload: SeasonalRateCreate,
    tenant_id: TenantId,
    session: DbSession,
) -> SeasonalRateRead:
    try:
        rate = await room_service.create_rate(
            session, tenant_id=tenant_id, room_id=room_id, payload=payload
        )
    except RoomNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return SeasonalRateRead.model_validate(rate)


@router.put(
    "/{room_id}/rates/{rate_id}",
    response_model=SeasonalRateRead,
    summary="Update seasonal rate",
)
async def update_seasonal_rate(
    room_id: uuid.UUID,
    rate_id: uuid.UUID,
    payload: SeasonalRateUpdate,
    tenant_id: TenantId,
    session: DbSession,
) -> SeasonalRateRead:
    try:
        rate = await room_service.get_rate(
            session, tenant_id=tenant_id, room_id=room_id, rate_id=rate_id
        )
        updated = await room_service.update_rate(session, rate=rate, payload=payload)
    except SeasonalRateNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except PricingInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return SeasonalRateRead.model_validate(updated)


@router.delete(
    "/{room_id}/rates/{rate_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete seasonal rate",
)
async def delete_seasonal_rate(
    room_id: uuid.UUID,
    rate_id: uuid.UUID,
    tenant_id: TenantId,
    session: DbSession,
) -> None:
    try:
        rate = await room_service.get_rate(
            session, tenant_id=tenant_id, room_id=room_id, rate_id=rate_id
        )
    except SeasonalRateNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    await room_service.delete_rate(session, rate=rate)
    return None


@router.get(
    "/{room_id}/price",
    response_model=RoomNightPriceRead,
    summary="Effective price for one date",
)
async def get_room_price(
    room_id: uuid.UUID,
    tenant_id: TenantId,
    engine: Engine,
    date: str | None = Query(default=None),
) -> RoomNightPriceRead:
    if not date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Date query parameter required",
        )
    day = _parse_date(date, "date")
    try:
        room, night = await engine.quote_night(tenant_id, room_id, day)
    except RoomNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return RoomNightPriceRead(
        date=night.date,
        base_price=night.base_price,
        effective_price=night.effective_price,
        seasonal_rate=(
            SeasonalRateRef.model_validate(night.seasonal_rate)
            if night.seasonal_rate is not None
            else None
        ),
        currency=room.currency,
    )


@router.get(
    "/{room_id}/prices",
    response_model=RoomPricesRead,
    summary="Night-by-night prices for a stay",
)
async def get_room_prices(
    room_id: uuid.UUID,
    tenant_id: TenantId,
    engine: Engine,
    start_date: str | None = Query(default=None),
    end_date: str | None = Query(default=None),
) -> RoomPricesRead:
    if not start_date or not end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date and end_date query parameters required",
        )
    start = _parse_date(start_date, "start_date")
    end = _parse_date(end_date, "end_date")
    try:
        result = await engine.quote_price(tenant_id, room_id, start, end)
    except PricingInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except RoomNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return RoomPricesRead.model_validate(result)
