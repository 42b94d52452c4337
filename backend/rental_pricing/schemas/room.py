"""Schemas for rooms and seasonal rates."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from rental_pricing.schemas.pricing import Money


class RoomBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    room_code: str | None = Field(default=None, max_length=50)
    base_price_per_night: Decimal = Field(ge=Decimal("0"))
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    min_stay_nights: int = Field(default=1, ge=1)
    max_stay_nights: int | None = Field(default=None, ge=1)
    is_active: bool = True

    @model_validator(mode="after")
    def _check_stay_limits(self) -> "RoomBase":
        if self.max_stay_nights is not None and self.max_stay_nights < self.min_stay_nights:
            raise ValueError("max_stay_nights must be >= min_stay_nights")
        return self


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    """Partial room update; stay limits are re-checked against stored values."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    room_code: str | None = Field(default=None, max_length=50)
    base_price_per_night: Decimal | None = Field(default=None, ge=Decimal("0"))
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    min_stay_nights: int | None = Field(default=None, ge=1)
    max_stay_nights: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class RoomRead(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str
    description: str | None = None
    room_code: str | None = None
    base_price_per_night: Money
    currency: str
    min_stay_nights: int
    max_stay_nights: int | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SeasonalRateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    start_date: date
    end_date: date
    price_per_night: Decimal = Field(ge=Decimal("0"))
    priority: int = 0
    min_nights: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _check_range(self) -> "SeasonalRateCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class SeasonalRateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    start_date: date | None = None
    end_date: date | None = None
    price_per_night: Decimal | None = Field(default=None, ge=Decimal("0"))
    priority: int | None = None
    min_nights: int | None = Field(default=None, ge=1)


class SeasonalRateRead(BaseModel):
    id: uuid.UUID
    room_id: uuid.UUID
    name: str
    start_date: date
    end_date: date
    price_per_night: Money
    priority: int
    min_nights: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
