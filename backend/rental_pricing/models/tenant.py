"""Tenant model representing a property business on the platform."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rental_pricing.db.base import Base
from rental_pricing.models.mixins import TimestampMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from rental_pricing.models.coupon import Coupon
    from rental_pricing.models.room import Room


class Tenant(TimestampMixin, Base):
    """A tenant owning rooms, seasonal rates and coupons."""

    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    rooms: Mapped[list["Room"]] = relationship(
        "Room", back_populates="tenant", cascade="all, delete-orphan"
    )
    coupons: Mapped[list["Coupon"]] = relationship(
        "Coupon", back_populates="tenant", cascade="all, delete-orphan"
    )
