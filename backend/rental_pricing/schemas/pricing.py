"""Pricing schema definitions."""

from __future__ import annotations

import uuid
import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer

# Money travels as a JSON number; Decimal is kept for validation and in Python.
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class SeasonalRateRef(BaseModel):
    """Seasonal rate that priced a night."""

    id: uuid.UUID
    name: str
    price_per_night: Money

    model_config = ConfigDict(from_attributes=True)


class NightPriceRead(BaseModel):
    """Price breakdown for one night."""

    date: datetime.date
    base_price: Money
    effective_price: Money
    seasonal_rate: SeasonalRateRef | None = None

    model_config = ConfigDict(from_attributes=True)


class RoomPricesRead(BaseModel):
    """Night-by-night quote for a stay."""

    room_id: uuid.UUID
    start_date: datetime.date
    end_date: datetime.date
    nights: list[NightPriceRead]
    total_nights: int
    total_amount: Money
    currency: str
    warnings: list[str] = []

    model_config = ConfigDict(from_attributes=True)


class RoomNightPriceRead(NightPriceRead):
    """Effective price of a single date."""

    currency: str
