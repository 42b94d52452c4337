"""ORM models package export."""

from rental_pricing.models.coupon import Coupon, CouponUsage, DiscountType
from rental_pricing.models.room import Room, SeasonalRate
from rental_pricing.models.tenant import Tenant

__all__ = [
    "Coupon",
    "CouponUsage",
    "DiscountType",
    "Room",
    "SeasonalRate",
    "Tenant",
]
