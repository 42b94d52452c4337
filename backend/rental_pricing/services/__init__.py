"""Service layer exports."""
from rental_pricing.services import (
    coupon_service,
    pricing_service,
    room_service,
)

__all__ = [
    "coupon_service",
    "pricing_service",
    "room_service",
]
