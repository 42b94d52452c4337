"""Exceptions raised by the pricing engine and its repositories."""

from __future__ import annotations


class PricingInputError(ValueError):
    """Raised for malformed caller input such as an inverted date range."""


class RoomNotFoundError(LookupError):
    """Raised when a room does not exist for the tenant."""


class SeasonalRateNotFoundError(LookupError):
    """Raised when a seasonal rate does not exist for the room."""


class CouponNotFoundError(LookupError):
    """Raised when a coupon does not exist for the tenant."""


class CouponCodeConflictError(ValueError):
    """Raised when a coupon code is already taken within a tenant."""


class CouponUsageLimitError(RuntimeError):
    """Raised when a redemption cannot be recorded: coupon inactive or a usage cap reached."""


class PricingConfigurationError(RuntimeError):
    """Raised when stored pricing data is inconsistent (e.g. unknown discount type)."""
