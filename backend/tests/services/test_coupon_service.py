"""Tests for coupon management and redemption bookkeeping."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

import pytest

from rental_pricing.db.session import get_sessionmaker
from rental_pricing.models import Coupon, CouponUsage, DiscountType, Room, Tenant
from rental_pricing.schemas.coupon import CouponCreate, CouponUpdate
from rental_pricing.services import coupon_service
from rental_pricing.services.errors import (
    CouponCodeConflictError,
    CouponNotFoundError,
    CouponUsageLimitError,
    PricingInputError,
)
from rental_pricing.services.pricing_service import engine_for_session
from rental_pricing.services.pricing_types import CouponContext

pytestmark = pytest.mark.asyncio


async def _seed_tenant(session) -> Tenant:
    tenant = Tenant(name="Harbour House", slug=f"harbour-{uuid.uuid4().hex[:6]}")
    session.add(tenant)
    await session.commit()
    return tenant


def _payload(**overrides) -> CouponCreate:
    values = {
        "code": " winter25 ",
        "name": "Winter special",
        "discount_type": DiscountType.FIXED_AMOUNT,
        "discount_value": Decimal("250"),
    }
    values.update(overrides)
    return CouponCreate(**values)


async def _redeem(session, tenant: Tenant, coupon: Coupon, email: str) -> CouponUsage:
    return await coupon_service.record_coupon_usage(
        session,
        tenant_id=tenant.id,
        coupon_id=coupon.id,
        customer_email=email,
        discount_applied=Decimal("250"),
        original_amount=Decimal("2000"),
        final_amount=Decimal("1750"),
    )


async def test_create_coupon_normalizes_code(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        coupon = await coupon_service.create_coupon(
            session, tenant_id=tenant.id, payload=_payload()
        )
        assert coupon.code == "WINTER25"
        assert coupon.current_uses == 0
        assert coupon.applicable_room_ids == []
        assert coupon.discount_type == "fixed_amount"


async def test_duplicate_code_conflicts_case_insensitively(
    reset_database, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        await coupon_service.create_coupon(session, tenant_id=tenant.id, payload=_payload())
        with pytest.raises(CouponCodeConflictError):
            await coupon_service.create_coupon(
                session, tenant_id=tenant.id, payload=_payload(code="Winter25")
            )

        other = await _seed_tenant(session)
        coupon = await coupon_service.create_coupon(
            session, tenant_id=other.id, payload=_payload()
        )
        assert coupon.tenant_id == other.id


async def test_update_coupon_validates_percentage(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        coupon = await coupon_service.create_coupon(
            session, tenant_id=tenant.id, payload=_payload()
        )
        with pytest.raises(PricingInputError):
            await coupon_service.update_coupon(
                session,
                coupon=coupon,
                payload=CouponUpdate(discount_type=DiscountType.PERCENTAGE),
            )

        updated = await coupon_service.update_coupon(
            session,
            coupon=coupon,
            payload=CouponUpdate(name="Winter deal", code="winter-deal", max_uses=3),
        )
        assert updated.name == "Winter deal"
        assert updated.code == "WINTER-DEAL"
        assert updated.max_uses == 3


async def test_list_coupons_filters_by_room_and_search(
    reset_database, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        room = Room(
            tenant_id=tenant.id, name="Loft", base_price_per_night=Decimal("800"), currency="ZAR"
        )
        session.add(room)
        await session.commit()

        await coupon_service.create_coupon(session, tenant_id=tenant.id, payload=_payload())
        await coupon_service.create_coupon(
            session,
            tenant_id=tenant.id,
            payload=_payload(code="LOFTONLY", name="Loft deal", applicable_room_ids=[room.id]),
        )
        await coupon_service.create_coupon(
            session,
            tenant_id=tenant.id,
            payload=_payload(
                code="OTHERROOM", name="Elsewhere", applicable_room_ids=[uuid.uuid4()]
            ),
        )

        for_room = await coupon_service.list_coupons(
            session, tenant_id=tenant.id, room_id=room.id
        )
        assert {coupon.code for coupon in for_room} == {"WINTER25", "LOFTONLY"}

        searched = await coupon_service.list_coupons(
            session, tenant_id=tenant.id, search="loft"
        )
        assert [coupon.code for coupon in searched] == ["LOFTONLY"]


async def test_soft_and_hard_delete(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        coupon = await coupon_service.create_coupon(
            session, tenant_id=tenant.id, payload=_payload()
        )
        await coupon_service.delete_coupon(session, coupon=coupon)
        assert coupon.is_active is False

        await coupon_service.delete_coupon(session, coupon=coupon, hard=True)
        with pytest.raises(CouponNotFoundError):
            await coupon_service.get_coupon(session, tenant_id=tenant.id, coupon_id=coupon.id)


async def test_record_usage_increments_counter(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        coupon = await coupon_service.create_coupon(
            session, tenant_id=tenant.id, payload=_payload(max_uses=2)
        )

        usage = await _redeem(session, tenant, coupon, "Guest@Example.com")

        assert usage.customer_email == "guest@example.com"
        assert usage.final_amount == Decimal("1750.00")
        refreshed = await coupon_service.get_coupon(
            session, tenant_id=tenant.id, coupon_id=coupon.id
        )
        assert refreshed.current_uses == 1
        history = await coupon_service.list_usage(
            session, tenant_id=tenant.id, coupon_id=coupon.id
        )
        assert [entry.id for entry in history] == [usage.id]


async def test_record_usage_stops_at_limit(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        coupon = await coupon_service.create_coupon(
            session, tenant_id=tenant.id, payload=_payload(max_uses=1)
        )
        tenant_id, coupon_id = tenant.id, coupon.id
        await _redeem(session, tenant, coupon, "first@example.com")
        with pytest.raises(CouponUsageLimitError):
            await _redeem(session, tenant, coupon, "second@example.com")

    async with sessionmaker() as session:
        fresh = await coupon_service.get_coupon(
            session, tenant_id=tenant_id, coupon_id=coupon_id
        )
        assert fresh.current_uses == 1
        usages = await coupon_service.list_usage(
            session, tenant_id=tenant_id, coupon_id=coupon_id
        )
        assert len(usages) == 1


async def test_stale_validation_cannot_overrun_limit(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        coupon = await coupon_service.create_coupon(
            session, tenant_id=tenant.id, payload=_payload(max_uses=1)
        )

    # Both bookings validate while one use remains.
    async with sessionmaker() as first, sessionmaker() as second:
        context = CouponContext(subtotal=Decimal("2000"), nights=2)
        assert (await engine_for_session(first).validate_coupon(tenant.id, "WINTER25", context)).valid
        assert (await engine_for_session(second).validate_coupon(tenant.id, "WINTER25", context)).valid

        await _redeem(first, tenant, coupon, "a@example.com")
        with pytest.raises(CouponUsageLimitError):
            await _redeem(second, tenant, coupon, "b@example.com")


async def test_record_usage_enforces_per_customer_limit(
    reset_database, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        coupon = await coupon_service.create_coupon(
            session, tenant_id=tenant.id, payload=_payload(max_uses_per_customer=1)
        )
        tenant_id, coupon_id = tenant.id, coupon.id
        await _redeem(session, tenant, coupon, "guest@example.com")
        with pytest.raises(CouponUsageLimitError, match="maximum number of times"):
            await _redeem(session, tenant, coupon, "GUEST@example.com")

    async with sessionmaker() as session:
        stored = await session.get(Coupon, coupon_id)
        assert stored.current_uses == 1
        usages = await coupon_service.list_usage(
            session, tenant_id=tenant_id, coupon_id=coupon_id
        )
        assert [usage.customer_email for usage in usages] == ["guest@example.com"]

        validation = await engine_for_session(session).validate_coupon(
            tenant_id,
            "winter25",
            CouponContext(customer_email="Guest@Example.com"),
        )
        assert validation.errors == [
            "You have already used this coupon the maximum number of times"
        ]


async def test_inactive_coupon_cannot_be_redeemed(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = await _seed_tenant(session)
        coupon = await coupon_service.create_coupon(
            session,
            tenant_id=tenant.id,
            payload=_payload(valid_until=datetime.date(2030, 1, 1), is_active=False),
        )
        with pytest.raises(CouponUsageLimitError):
            await _redeem(session, tenant, coupon, "guest@example.com")
