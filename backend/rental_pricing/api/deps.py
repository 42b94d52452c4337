"""Common API dependencies."""

from __future__ import annotations

import uuid
from typing import Annotated
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_pricing.core.config import get_settings
from rental_pricing.db.session import get_session
from rental_pricing.services.pricing_service import PricingEngine, engine_for_session

settings = get_settings()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


async def get_tenant_id(
    tenant_header: Annotated[str | None, Header(alias=settings.tenant_header)] = None,
) -> uuid.UUID:
    """Resolve the tenant the request acts for."""
    if not tenant_header:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Tenant ID required"
        )
    try:
        return uuid.UUID(tenant_header.strip())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid tenant ID"
        ) from exc


async def get_pricing_engine(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PricingEngine:
    """Build a pricing engine over the request's session."""
    return engine_for_session(session)


TenantId = Annotated[uuid.UUID, Depends(get_tenant_id)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Engine = Annotated[PricingEngine, Depends(get_pricing_engine)]
