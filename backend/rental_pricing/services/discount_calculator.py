"""Compute the discount granted by a validated coupon."""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal

from rental_pricing.models.coupon import DiscountType
from rental_pricing.services.errors import PricingConfigurationError
from rental_pricing.services.money import ZERO, to_decimal, to_money
from rental_pricing.services.pricing_types import CouponSnapshot

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")


def _percentage(value: Decimal, subtotal: Decimal, nights: int) -> Decimal:
    return subtotal * value / _HUNDRED


def _fixed_amount(value: Decimal, subtotal: Decimal, nights: int) -> Decimal:
    return min(value, subtotal)


def _free_nights(value: Decimal, subtotal: Decimal, nights: int) -> Decimal:
    if nights <= 0:
        return ZERO
    nightly_rate = subtotal / Decimal(nights)
    free_nights = min(value, Decimal(nights))
    return nightly_rate * free_nights


_HANDLERS: dict[str, Callable[[Decimal, Decimal, int], Decimal]] = {
    DiscountType.PERCENTAGE.value: _percentage,
    DiscountType.FIXED_AMOUNT.value: _fixed_amount,
    DiscountType.FREE_NIGHTS.value: _free_nights,
}


def calculate_discount(
    coupon: CouponSnapshot, *, subtotal: Decimal, nights: int
) -> Decimal:
    """Return the discount for ``coupon`` rounded half-up to the cent.

    Raises :class:`PricingConfigurationError` when the stored discount type is
    not one the engine understands.
    """

    handler = _HANDLERS.get(coupon.discount_type)
    if handler is None:
        logger.error(
            "Coupon %s has unrecognized discount type %r",
            coupon.id,
            coupon.discount_type,
        )
        raise PricingConfigurationError(
            f"Unrecognized discount type {coupon.discount_type!r} on coupon {coupon.code}"
        )

    amount = to_decimal(subtotal)
    if amount <= 0:
        return ZERO
    discount = handler(to_decimal(coupon.discount_value), amount, nights)
    return max(to_money(discount), ZERO)
