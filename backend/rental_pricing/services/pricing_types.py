"""Immutable snapshots and results exchanged by the pricing engine."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from rental_pricing.services.money import ZERO, to_money


@dataclass(frozen=True, slots=True)
class RoomSnapshot:
    """Point-in-time view of the room fields pricing depends on."""

    id: UUID
    tenant_id: UUID
    name: str
    base_price_per_night: Decimal
    currency: str
    min_stay_nights: int = 1
    max_stay_nights: int | None = None


@dataclass(frozen=True, slots=True)
class SeasonalRateSnapshot:
    """Point-in-time view of a seasonal rate."""

    id: UUID
    room_id: UUID
    name: str
    start_date: datetime.date
    end_date: datetime.date
    price_per_night: Decimal
    priority: int = 0
    min_nights: int | None = None
    created_at: datetime.datetime | None = None

    @property
    def span_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def covers(self, day: datetime.date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True, slots=True)
class CouponSnapshot:
    """Point-in-time view of a coupon row."""

    id: UUID
    tenant_id: UUID
    code: str
    name: str
    discount_type: str
    discount_value: Decimal
    description: str | None = None
    is_active: bool = True
    valid_from: datetime.date | None = None
    valid_until: datetime.date | None = None
    applicable_room_ids: tuple[str, ...] = ()
    max_uses: int | None = None
    current_uses: int = 0
    max_uses_per_customer: int | None = None
    min_booking_amount: Decimal | None = None
    min_nights: int | None = None


@dataclass(slots=True)
class NightPrice:
    """Resolved price for one night of a stay."""

    date: datetime.date
    base_price: Decimal
    effective_price: Decimal
    seasonal_rate: SeasonalRateSnapshot | None = None
    override_price: Decimal | None = None

    @property
    def charged_price(self) -> Decimal:
        """Amount billed for the night: the override when set, else the resolved price."""
        if self.override_price is not None:
            return self.override_price
        return self.effective_price


@dataclass(slots=True)
class PricingResult:
    """Night-by-night quote for a room stay."""

    room_id: UUID
    start_date: datetime.date
    end_date: datetime.date
    nights: list[NightPrice]
    total_amount: Decimal
    currency: str
    warnings: list[str] = field(default_factory=list)

    @property
    def total_nights(self) -> int:
        return len(self.nights)


@dataclass(slots=True)
class CouponContext:
    """Booking details a coupon is validated against."""

    room_ids: list[str] = field(default_factory=list)
    customer_email: str | None = None
    subtotal: Decimal | None = None
    nights: int | None = None
    check_in: datetime.date | None = None


@dataclass(frozen=True, slots=True)
class CouponSummary:
    """Public subset of coupon fields returned to callers."""

    id: UUID
    code: str
    name: str
    description: str | None
    discount_type: str
    discount_value: Decimal

    @classmethod
    def from_snapshot(cls, coupon: CouponSnapshot) -> "CouponSummary":
        return cls(
            id=coupon.id,
            code=coupon.code,
            name=coupon.name,
            description=coupon.description,
            discount_type=coupon.discount_type,
            discount_value=coupon.discount_value,
        )


@dataclass(slots=True)
class CouponValidation:
    """Outcome of validating a coupon code.

    A successful validation is advisory: it does not reserve a redemption.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    coupon: CouponSummary | None = None
    discount_amount: Decimal = ZERO
    final_amount: Decimal = ZERO

    @classmethod
    def rejected(cls, errors: list[str]) -> "CouponValidation":
        return cls(valid=False, errors=list(errors))

    @classmethod
    def accepted(
        cls,
        coupon: CouponSnapshot,
        *,
        discount_amount: Decimal,
        subtotal: Decimal,
    ) -> "CouponValidation":
        return cls(
            valid=True,
            coupon=CouponSummary.from_snapshot(coupon),
            discount_amount=discount_amount,
            final_amount=to_money(subtotal - discount_amount),
        )
