"""Rooms and their seasonal rate overrides."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rental_pricing.db.base import Base
from rental_pricing.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from rental_pricing.models.tenant import Tenant


class Room(TimestampMixin, Base):
    """A bookable room listed by a tenant."""

    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("base_price_per_night >= 0", name="valid_base_price"),
        CheckConstraint("min_stay_nights > 0", name="valid_min_stay"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    room_code: Mapped[str | None] = mapped_column(String(50))
    base_price_per_night: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="ZAR")
    min_stay_nights: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_stay_nights: Mapped[int | None] = mapped_column(Integer)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="rooms")
    seasonal_rates: Mapped[list["SeasonalRate"]] = relationship(
        "SeasonalRate", back_populates="room", cascade="all, delete-orphan"
    )


class SeasonalRate(TimestampMixin, Base):
    """Date-ranged nightly price override with an overlap priority."""

    __tablename__ = "seasonal_rates"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="valid_date_range"),
        CheckConstraint("price_per_night >= 0", name="valid_price"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_nights: Mapped[int | None] = mapped_column(Integer)

    room: Mapped["Room"] = relationship("Room", back_populates="seasonal_rates")
