"""Tests for coupon discount formulas."""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from rental_pricing.models.coupon import DiscountType
from rental_pricing.services.discount_calculator import calculate_discount
from rental_pricing.services.errors import PricingConfigurationError
from rental_pricing.services.pricing_types import CouponSnapshot


def _coupon(discount_type: str, value: str) -> CouponSnapshot:
    return CouponSnapshot(
        id=uuid.uuid4(),
        tenant_id=uuid.uuid4(),
        code="PROMO",
        name="Promo",
        discount_type=discount_type,
        discount_value=Decimal(value),
    )


def test_percentage_discount() -> None:
    coupon = _coupon(DiscountType.PERCENTAGE.value, "10")
    assert calculate_discount(coupon, subtotal=Decimal("3500"), nights=3) == Decimal("350.00")


def test_percentage_is_linear_in_subtotal() -> None:
    coupon = _coupon(DiscountType.PERCENTAGE.value, "15")
    single = calculate_discount(coupon, subtotal=Decimal("200"), nights=1)
    double = calculate_discount(coupon, subtotal=Decimal("400"), nights=1)
    assert double == single * 2


def test_full_percentage_discounts_everything() -> None:
    coupon = _coupon(DiscountType.PERCENTAGE.value, "100")
    assert calculate_discount(coupon, subtotal=Decimal("1234.56"), nights=2) == Decimal(
        "1234.56"
    )


def test_fixed_amount_is_capped_at_subtotal() -> None:
    coupon = _coupon(DiscountType.FIXED_AMOUNT.value, "500")
    assert calculate_discount(coupon, subtotal=Decimal("3500"), nights=3) == Decimal("500.00")
    assert calculate_discount(coupon, subtotal=Decimal("300"), nights=1) == Decimal("300.00")


def test_free_nights_uses_average_nightly_rate() -> None:
    coupon = _coupon(DiscountType.FREE_NIGHTS.value, "1")
    assert calculate_discount(coupon, subtotal=Decimal("3500"), nights=3) == Decimal(
        "1166.67"
    )


def test_free_nights_beyond_stay_discounts_whole_subtotal() -> None:
    coupon = _coupon(DiscountType.FREE_NIGHTS.value, "5")
    assert calculate_discount(coupon, subtotal=Decimal("3000"), nights=3) == Decimal(
        "3000.00"
    )


def test_free_nights_with_zero_nights_is_zero() -> None:
    coupon = _coupon(DiscountType.FREE_NIGHTS.value, "1")
    assert calculate_discount(coupon, subtotal=Decimal("3000"), nights=0) == Decimal("0.00")


def test_zero_subtotal_is_zero_for_every_type() -> None:
    for discount_type in DiscountType:
        coupon = _coupon(discount_type.value, "10")
        assert calculate_discount(coupon, subtotal=Decimal("0"), nights=2) == Decimal("0.00")


def test_discount_never_exceeds_subtotal() -> None:
    subtotal = Decimal("999.99")
    for discount_type, value in (
        (DiscountType.PERCENTAGE, "100"),
        (DiscountType.FIXED_AMOUNT, "5000"),
        (DiscountType.FREE_NIGHTS, "30"),
    ):
        discount = calculate_discount(
            _coupon(discount_type.value, value), subtotal=subtotal, nights=3
        )
        assert Decimal("0") <= discount <= subtotal


def test_unknown_discount_type_raises() -> None:
    coupon = _coupon("buy_one_get_one", "1")
    with pytest.raises(PricingConfigurationError):
        calculate_discount(coupon, subtotal=Decimal("100"), nights=1)
