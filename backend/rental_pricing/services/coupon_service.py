"""Coupon management and redemption bookkeeping."""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rental_pricing.models import Coupon, CouponUsage
from rental_pricing.schemas.coupon import CouponCreate, CouponUpdate
from rental_pricing.services.errors import (
    CouponCodeConflictError,
    CouponNotFoundError,
    CouponUsageLimitError,
    PricingInputError,
)
from rental_pricing.services.money import to_money
from rental_pricing.services.repositories import SqlCouponRepository

logger = logging.getLogger(__name__)

_CONFLICT_MESSAGE = "A coupon with this code already exists"


def _normalize_code(code: str) -> str:
    return code.strip().upper()


def _room_ids(values: list[uuid.UUID] | None) -> list[str]:
    return [str(value) for value in values or []]


async def _ensure_code_available(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    code: str,
    exclude_id: uuid.UUID | None = None,
) -> None:
    stmt = select(Coupon.id).where(
        Coupon.tenant_id == tenant_id, func.lower(Coupon.code) == code.lower()
    )
    if exclude_id is not None:
        stmt = stmt.where(Coupon.id != exclude_id)
    if (await session.execute(stmt)).first() is not None:
        raise CouponCodeConflictError(_CONFLICT_MESSAGE)


async def list_coupons(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    is_active: bool | None = None,
    room_id: uuid.UUID | None = None,
    search: str | None = None,
) -> list[Coupon]:
    stmt: Select[tuple[Coupon]] = select(Coupon).where(Coupon.tenant_id == tenant_id)
    if is_active is not None:
        stmt = stmt.where(Coupon.is_active.is_(is_active))
    if search:
        pattern = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(func.lower(Coupon.code).like(pattern), func.lower(Coupon.name).like(pattern))
        )
    stmt = stmt.order_by(Coupon.created_at.desc())
    coupons = list((await session.execute(stmt)).scalars().all())
    if room_id is None:
        return coupons
    # An empty applicability list means the coupon covers every room.
    target = str(room_id)
    return [
        coupon
        for coupon in coupons
        if not coupon.applicable_room_ids or target in coupon.applicable_room_ids
    ]


async def get_coupon(
    session: AsyncSession, *, tenant_id: uuid.UUID, coupon_id: uuid.UUID
) -> Coupon:
    coupon = await session.get(Coupon, coupon_id)
    if coupon is None or coupon.tenant_id != tenant_id:
        raise CouponNotFoundError("Coupon not found")
    return coupon


async def create_coupon(
    session: AsyncSession, *, tenant_id: uuid.UUID, payload: CouponCreate
) -> Coupon:
    code = _normalize_code(payload.code)
    await _ensure_code_available(session, tenant_id=tenant_id, code=code)
    data = payload.model_dump()
    data.update(
        code=code,
        discount_type=payload.discount_type.value,
        applicable_room_ids=_room_ids(payload.applicable_room_ids),
    )
    coupon = Coupon(tenant_id=tenant_id, current_uses=0, **data)
    session.add(coupon)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise CouponCodeConflictError(_CONFLICT_MESSAGE) from exc
    await session.refresh(coupon)
    logger.info("Created coupon %s for tenant %s", coupon.code, tenant_id)
    return coupon


async def update_coupon(
    session: AsyncSession, *, coupon: Coupon, payload: CouponUpdate
) -> Coupon:
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("code") is not None:
        changes["code"] = _normalize_code(changes["code"])
        await _ensure_code_available(
            session,
            tenant_id=coupon.tenant_id,
            code=changes["code"],
            exclude_id=coupon.id,
        )
    if "discount_type" in changes and changes["discount_type"] is not None:
        changes["discount_type"] = changes["discount_type"].value
    if "applicable_room_ids" in changes:
        changes["applicable_room_ids"] = _room_ids(changes["applicable_room_ids"])

    for required in ("code", "name", "discount_type", "discount_value", "is_active"):
        if required in changes and changes[required] is None:
            changes.pop(required)

    discount_type = changes.get("discount_type", coupon.discount_type)
    discount_value = changes.get("discount_value", coupon.discount_value)
    if discount_type == "percentage" and discount_value > Decimal("100"):
        raise PricingInputError("Percentage discount cannot exceed 100")
    valid_from = changes.get("valid_from", coupon.valid_from)
    valid_until = changes.get("valid_until", coupon.valid_until)
    if valid_from and valid_until and valid_until < valid_from:
        raise PricingInputError("valid_until must not be before valid_from")

    for key, value in changes.items():
        setattr(coupon, key, value)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise CouponCodeConflictError(_CONFLICT_MESSAGE) from exc
    await session.refresh(coupon)
    return coupon


async def delete_coupon(
    session: AsyncSession, *, coupon: Coupon, hard: bool = False
) -> None:
    """Deactivate the coupon, or remove it entirely when ``hard`` is set."""
    if hard:
        await session.delete(coupon)
    else:
        coupon.is_active = False
    await session.commit()


async def list_usage(
    session: AsyncSession, *, tenant_id: uuid.UUID, coupon_id: uuid.UUID
) -> list[CouponUsage]:
    await get_coupon(session, tenant_id=tenant_id, coupon_id=coupon_id)
    stmt: Select[tuple[CouponUsage]] = (
        select(CouponUsage)
        .where(CouponUsage.coupon_id == coupon_id, CouponUsage.tenant_id == tenant_id)
        .order_by(CouponUsage.used_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def record_coupon_usage(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    coupon_id: uuid.UUID,
    customer_email: str,
    discount_applied: Decimal,
    original_amount: Decimal,
    final_amount: Decimal,
    booking_id: uuid.UUID | None = None,
) -> CouponUsage:
    """Record a redemption at booking commit time.

    The usage counter is bumped with a conditional UPDATE so two concurrent
    bookings cannot both take the last remaining use; an earlier successful
    validation is not trusted. The per-customer count runs after that UPDATE,
    while the coupon row is locked, so concurrent redemptions by one customer
    are counted one after the other.
    """

    coupon = await get_coupon(session, tenant_id=tenant_id, coupon_id=coupon_id)
    email = customer_email.strip().lower()

    if not coupon.is_active:
        raise CouponUsageLimitError("This coupon is no longer active")

    stmt = (
        update(Coupon)
        .where(
            Coupon.id == coupon_id,
            Coupon.tenant_id == tenant_id,
            Coupon.is_active.is_(True),
            or_(Coupon.max_uses.is_(None), Coupon.current_uses < Coupon.max_uses),
        )
        .values(current_uses=Coupon.current_uses + 1)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount == 0:
        await session.rollback()
        logger.warning("Coupon %s could not be redeemed: limit reached", coupon_id)
        raise CouponUsageLimitError("This coupon has reached its maximum usage limit")

    if coupon.max_uses_per_customer is not None:
        used = await SqlCouponRepository(session).count_customer_uses(coupon.id, email)
        if used >= coupon.max_uses_per_customer:
            await session.rollback()
            logger.warning(
                "Coupon %s could not be redeemed by %s: per-customer limit reached",
                coupon_id,
                email,
            )
            raise CouponUsageLimitError(
                "Customer has already used this coupon the maximum number of times"
            )

    usage = CouponUsage(
        coupon_id=coupon_id,
        tenant_id=tenant_id,
        booking_id=booking_id,
        customer_email=email,
        discount_applied=to_money(discount_applied),
        original_amount=to_money(original_amount),
        final_amount=to_money(final_amount),
    )
    session.add(usage)
    await session.commit()
    await session.refresh(usage)
    await session.refresh(coupon)
    logger.info("Recorded redemption of coupon %s by %s", coupon.code, email)
    return usage
