"""Versioned API router."""

from fastapi import APIRouter

from . import coupons, health, rooms

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
router.include_router(coupons.router, prefix="/coupons", tags=["coupons"])
