"""Tests for health check endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from booker.db.database import get_session
from booker.main import app


@pytest.fixture
async def health_client():
    """Provide an async test client with an in-memory database session."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    factory = sessionmaker(engine, class_=Session, expire_on_commit=False)

    def override_get_session():
        with factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    engine.dispose()


class TestHealthEndpoint:
    async def test_health_returns_healthy(self, health_client: AsyncClient) -> None:
        """Liveness probe returns healthy."""
        response = await health_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] is None


class TestReadyEndpoint:
    async def test_ready_with_database(self, health_client: AsyncClient) -> None:
        """Readiness probe reports a connected database."""
        response = await health_client.get("/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["database"] == "connected"


def test_app_imports() -> None:
    """Verify the app can be imported without errors."""
    assert app.title == "Booker"
