"""Schemas for coupons, their usage history and validation."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from rental_pricing.models.coupon import DiscountType
from rental_pricing.schemas.pricing import Money


def _check_discount(discount_type: DiscountType | None, value: Decimal | None) -> None:
    if (
        discount_type is DiscountType.PERCENTAGE
        and value is not None
        and value > Decimal("100")
    ):
        raise ValueError("Percentage discount cannot exceed 100")


def _check_window(valid_from: date | None, valid_until: date | None) -> None:
    if valid_from and valid_until and valid_until < valid_from:
        raise ValueError("valid_until must not be before valid_from")


class CouponCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    discount_type: DiscountType
    discount_value: Decimal = Field(gt=Decimal("0"))
    applicable_room_ids: list[uuid.UUID] = []
    valid_from: date | None = None
    valid_until: date | None = None
    max_uses: int | None = Field(default=None, ge=1)
    max_uses_per_customer: int | None = Field(default=None, ge=1)
    min_booking_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    min_nights: int | None = Field(default=None, ge=1)
    is_active: bool = True

    @model_validator(mode="after")
    def _check(self) -> "CouponCreate":
        if not self.code.strip():
            raise ValueError("code must not be blank")
        _check_discount(self.discount_type, self.discount_value)
        _check_window(self.valid_from, self.valid_until)
        return self


class CouponUpdate(BaseModel):
    """Partial update; ``current_uses`` is deliberately not accepted."""

    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    discount_type: DiscountType | None = None
    discount_value: Decimal | None = Field(default=None, gt=Decimal("0"))
    applicable_room_ids: list[uuid.UUID] | None = None
    valid_from: date | None = None
    valid_until: date | None = None
    max_uses: int | None = Field(default=None, ge=1)
    max_uses_per_customer: int | None = Field(default=None, ge=1)
    min_booking_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    min_nights: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class CouponRead(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    code: str
    name: str
    description: str | None = None
    discount_type: str
    discount_value: Money
    applicable_room_ids: list[str]
    valid_from: date | None = None
    valid_until: date | None = None
    max_uses: int | None = None
    max_uses_per_customer: int | None = None
    current_uses: int
    min_booking_amount: Money | None = None
    min_nights: int | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CouponUsageRead(BaseModel):
    id: uuid.UUID
    coupon_id: uuid.UUID
    booking_id: uuid.UUID | None = None
    customer_email: str
    discount_applied: Money
    original_amount: Money
    final_amount: Money
    used_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CouponValidateRequest(BaseModel):
    """Booking context a code is checked against; every field but ``code`` is optional."""

    code: str | None = None
    room_id: uuid.UUID | None = None
    room_ids: list[uuid.UUID] = []
    customer_email: str | None = Field(default=None, max_length=255)
    subtotal: Decimal | None = Field(default=None, ge=Decimal("0"))
    nights: int | None = Field(default=None, ge=0)
    check_in: date | None = None

    def target_room_ids(self) -> list[str]:
        if self.room_ids:
            return [str(room_id) for room_id in self.room_ids]
        if self.room_id is not None:
            return [str(self.room_id)]
        return []


class CouponSummaryRead(BaseModel):
    id: uuid.UUID
    code: str
    name: str
    description: str | None = None
    discount_type: str
    discount_value: Money

    model_config = ConfigDict(from_attributes=True)


class CouponValidationRead(BaseModel):
    """``{valid: false, errors}`` on rejection, coupon and amounts on success."""

    valid: bool
    errors: list[str] | None = None
    coupon: CouponSummaryRead | None = None
    discount_amount: Money | None = None
    final_amount: Money | None = None
