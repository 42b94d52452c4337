"""Coupon management and validation endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse

from rental_pricing.api.deps import DbSession, Engine, TenantId
from rental_pricing.schemas.coupon import (
    CouponCreate,
    CouponRead,
    CouponSummaryRead,
    CouponUpdate,
    CouponUsageRead,
    CouponValidateRequest,
    CouponValidationRead,
)
from rental_pricing.services import coupon_service
from rental_pricing.services.errors import (
    CouponCodeConflictError,
    CouponNotFoundError,
    PricingInputError,
)
from rental_pricing.services.pricing_types import CouponContext

router = APIRouter()


@router.post(
    "/validate",
    response_model=CouponValidationRead,
    response_model_exclude_none=True,
    summary="Validate a coupon code and quote its discount",
)
async def validate_coupon(
    payload: CouponValidateRequest,
    tenant_id: TenantId,
    engine: Engine,
) -> CouponValidationRead | JSONResponse:
    context = CouponContext(
        room_ids=payload.target_room_ids(),
        customer_email=payload.customer_email,
        subtotal=payload.subtotal,
        nights=payload.nights,
        check_in=payload.check_in,
    )
    try:
        validation = await engine.validate_coupon(tenant_id, payload.code, context)
    except PricingInputError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"valid": False, "errors": [str(exc)]},
        )
    if not validation.valid or validation.coupon is None:
        return CouponValidationRead(valid=False, errors=validation.errors)
    return CouponValidationRead(
        valid=True,
        coupon=CouponSummaryRead.model_validate(validation.coupon),
        discount_amount=validation.discount_amount,
        final_amount=validation.final_amount,
    )


@router.get("", response_model=list[CouponRead], summary="List coupons")
async def list_coupons(
    tenant_id: TenantId,
    session: DbSession,
    is_active: bool | None = None,
    room_id: uuid.UUID | None = None,
    search: str | None = None,
) -> list[CouponRead]:
    coupons = await coupon_service.list_coupons(
        session,
        tenant_id=tenant_id,
        is_active=is_active,
        room_id=room_id,
        search=search,
    )
    return [CouponRead.model_validate(coupon) for coupon in coupons]


@router.post(
    "",
    response_model=CouponRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create coupon",
)
async def create_coupon(
    payload: CouponCreate,
    tenant_id: TenantId,
    session: DbSession,
) -> CouponRead:
    try:
        coupon = await coupon_service.create_coupon(
            session, tenant_id=tenant_id, payload=payload
        )
    except CouponCodeConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    return CouponRead.model_validate(coupon)


@router.get("/{coupon_id}", response_model=CouponRead, summary="Get coupon")
async def get_coupon(
    coupon_id: uuid.UUID,
    tenant_id: TenantId,
    session: DbSession,
) -> CouponRead:
    try:
        coupon = await coupon_service.get_coupon(
            session, tenant_id=tenant_id, coupon_id=coupon_id
        )
    except CouponNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return CouponRead.model_validate(coupon)


@router.put("/{coupon_id}", response_model=CouponRead, summary="Update coupon")
async def update_coupon(
    coupon_id: uuid.UUID,
    payload: CouponUpdate,
    tenant_id: TenantId,
    session: DbSession,
) -> CouponRead:
    try:
        coupon = await coupon_service.get_coupon(
            session, tenant_id=tenant_id, coupon_id=coupon_id
        )
        updated = await coupon_service.update_coupon(
            session, coupon=coupon, payload=payload
        )
    except CouponNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except CouponCodeConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    except PricingInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return CouponRead.model_validate(updated)


@router.delete(
    "/{coupon_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate or delete coupon",
)
async def delete_coupon(
    coupon_id: uuid.UUID,
    tenant_id: TenantId,
    session: DbSession,
    hard: bool = False,
) -> None:
    try:
        coupon = await coupon_service.get_coupon(
            session, tenant_id=tenant_id, coupon_id=coupon_id
        )
    except CouponNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    await coupon_service.delete_coupon(session, coupon=coupon, hard=hard)
    return None


@router.get(
    "/{coupon_id}/usage",
    response_model=list[CouponUsageRead],
    summary="List coupon redemptions",
)
async def list_coupon_usage(
    coupon_id: uuid.UUID,
    tenant_id: TenantId,
    session: DbSession,
) -> list[CouponUsageRead]:
    try:
        usages = await coupon_service.list_usage(
            session, tenant_id=tenant_id, coupon_id=coupon_id
        )
    except CouponNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return [CouponUsageRead.model_validate(usage) for usage in usages]
