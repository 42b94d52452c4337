"""Eligibility checks for promotional coupons."""

from __future__ import annotations

import logging
from uuid import UUID

from rental_pricing.services.errors import PricingInputError
from rental_pricing.services.money import to_str
from rental_pricing.services.pricing_types import CouponContext, CouponSnapshot
from rental_pricing.services.repositories import CouponRepository

logger = logging.getLogger(__name__)

CODE_REQUIRED = "Coupon code is required"
INVALID_CODE = "Invalid coupon code"


def normalize_code(code: str | None) -> str:
    normalized = (code or "").strip()
    if not normalized:
        raise PricingInputError(CODE_REQUIRED)
    return normalized


def _nights_label(count: int) -> str:
    return f"{count} night{'s' if count > 1 else ''}"


def check_rules(
    coupon: CouponSnapshot,
    context: CouponContext,
    *,
    customer_uses: int | None = None,
) -> list[str]:
    """Run every eligibility rule and return all failure messages in order."""

    errors: list[str] = []

    if not coupon.is_active:
        errors.append("This coupon is no longer active")

    check_in = context.check_in
    if coupon.valid_from is not None and check_in is not None:
        if check_in < coupon.valid_from:
            errors.append(f"This coupon is valid from {coupon.valid_from.isoformat()}")
    if coupon.valid_until is not None and check_in is not None:
        if check_in > coupon.valid_until:
            errors.append("This coupon has expired")

    if coupon.applicable_room_ids and context.room_ids:
        applicable = set(coupon.applicable_room_ids)
        if not any(str(room_id) in applicable for room_id in context.room_ids):
            errors.append("This coupon is not valid for the selected room(s)")

    if coupon.max_uses is not None and coupon.current_uses >= coupon.max_uses:
        errors.append("This coupon has reached its maximum usage limit")

    if (
        coupon.max_uses_per_customer is not None
        and customer_uses is not None
        and customer_uses >= coupon.max_uses_per_customer
    ):
        errors.append("You have already used this coupon the maximum number of times")

    if coupon.min_booking_amount is not None and context.subtotal is not None:
        if context.subtotal < coupon.min_booking_amount:
            errors.append(
                f"Minimum booking amount of {to_str(coupon.min_booking_amount)} required"
            )

    if coupon.min_nights is not None and context.nights is not None:
        if context.nights < coupon.min_nights:
            errors.append(f"Minimum stay of {_nights_label(coupon.min_nights)} required")

    return errors


class CouponValidator:
    """Look up a coupon by code and evaluate it against a booking context."""

    def __init__(self, repository: CouponRepository) -> None:
        self._repository = repository

    async def validate(
        self,
        tenant_id: UUID,
        code: str | None,
        context: CouponContext,
    ) -> tuple[CouponSnapshot | None, list[str]]:
        """Return ``(coupon, [])`` when eligible, otherwise ``(coupon|None, errors)``.

        An unknown code yields a single generic error so callers cannot probe
        which codes exist.
        """

        normalized = normalize_code(code)
        coupon = await self._repository.find_by_code(tenant_id, normalized)
        if coupon is None:
            logger.info("Coupon lookup miss for tenant %s", tenant_id)
            return None, [INVALID_CODE]

        customer_uses: int | None = None
        if coupon.max_uses_per_customer is not None and context.customer_email:
            customer_uses = await self._repository.count_customer_uses(
                coupon.id, context.customer_email
            )

        errors = check_rules(coupon, context, customer_uses=customer_uses)
        if errors:
            logger.debug("Coupon %s rejected: %s", coupon.code, "; ".join(errors))
        return coupon, errors
