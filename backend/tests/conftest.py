"""Test fixtures for the rental pricing backend."""
from __future__ import annotations

import datetime
import os
import uuid
from collections.abc import AsyncIterator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from rental_pricing.core.config import get_settings
from rental_pricing.db.base import Base
from rental_pricing.db.session import dispose_engine, get_sessionmaker
from rental_pricing.main import app
from rental_pricing.models import Coupon, DiscountType, Room, SeasonalRate, Tenant


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: AsyncIterator[None], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client and a seeded tenant with one room and coupon."""
    sessionmaker = get_sessionmaker(db_url)

    async with sessionmaker() as session:
        tenant = Tenant(name="Seaview Lodge", slug=f"seaview-{uuid.uuid4().hex[:8]}")
        session.add(tenant)
        await session.flush()

        room = Room(
            tenant_id=tenant.id,
            name="Garden Suite",
            base_price_per_night=Decimal("1000.00"),
            currency="ZAR",
            min_stay_nights=2,
            max_stay_nights=14,
        )
        session.add(room)
        await session.flush()

        session.add(
            SeasonalRate(
                tenant_id=tenant.id,
                room_id=room.id,
                name="Easter Weekend",
                start_date=datetime.date(2025, 4, 18),
                end_date=datetime.date(2025, 4, 18),
                price_per_night=Decimal("1500.00"),
                priority=5,
            )
        )

        coupon = Coupon(
            tenant_id=tenant.id,
            code="SUMMER10",
            name="Summer ten percent",
            discount_type=DiscountType.PERCENTAGE.value,
            discount_value=Decimal("10"),
            applicable_room_ids=[],
        )
        session.add(coupon)
        await session.commit()

        context: dict[str, object] = {
            "tenant_id": tenant.id,
            "room_id": room.id,
            "coupon_id": coupon.id,
            "headers": {get_settings().tenant_header: str(tenant.id)},
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
