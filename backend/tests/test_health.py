"""Health endpoint tests."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from rental_pricing.api.deps import get_db_session
from rental_pricing.db.session import dispose_engine, get_sessionmaker
from rental_pricing.main import app

pytestmark = pytest.mark.asyncio


async def test_healthcheck_reports_database(reset_database) -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "Rental Pricing API"
    assert payload["database"] == "ok"
    assert payload["default_currency"] == "ZAR"
    assert "X-Request-ID" in response.headers


async def test_healthcheck_degrades_without_database(tmp_path) -> None:
    missing_url = f"sqlite+aiosqlite:///{tmp_path / 'absent' / 'pricing.db'}"

    async def unreachable_session() -> AsyncIterator[AsyncSession]:
        async with get_sessionmaker(missing_url)() as session:
            yield session

    app.dependency_overrides[get_db_session] = unreachable_session
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/v1/health")
    finally:
        app.dependency_overrides.pop(get_db_session, None)
        await dispose_engine(missing_url)

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"
    assert response.json()["database"] == "unavailable"
