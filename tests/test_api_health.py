"""Tests for liveness, readiness and the catch-all error handler."""

from unittest.mock import AsyncMock, patch

from httpx import ASGITransport, AsyncClient

from clashvision.db.database import get_session
from clashvision.main import app


class TestHealthChecks:
    async def test_health(self, api_client: AsyncClient) -> None:
        """Liveness does not report on the database."""
        response = await api_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": None}

    async def test_ready(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/ready")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    async def test_not_ready_when_database_down(self) -> None:
        async def broken_session():
            session = AsyncMock()
            session.execute.side_effect = ConnectionError("database unreachable")
            yield session

        app.dependency_overrides[get_session] = broken_session
        try:
            async with AsyncClient(
                transport=ASGITransport(app=app), base_url="http://test"
            ) as client:
                response = await client.get("/ready")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json()["status"] == "not ready"


class TestUnexpectedErrors:
    async def test_unknown_failure_envelope(self, api_client: AsyncClient) -> None:
        """Unhandled exceptions render as a 500 unknown failure."""
        with patch(
            "clashvision.api.cards.get_card_catalog",
            new=AsyncMock(side_effect=RuntimeError("catalog exploded")),
        ):
            response = await api_client.get("/cards")

        assert response.status_code == 500
        data = response.json()
        assert data["outcome"] == "unknown_failure"
        assert data["failure"]["kind"] == "unknown"
        assert data["failure"]["detail"] == "RuntimeError"
