"""
Notes API: Health and Degraded-Startup Tests
=============================================

What:  /health status reporting, and the server's behaviour when started
       without a database URL (running, but every note operation fails).
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notes_api import __version__
from notes_api.config import Settings
from notes_api.main import create_app


@pytest_asyncio.fixture
async def client_without_database():
    application = create_app(Settings(database_url=None, log_level="WARNING", _env_file=None))
    async with application.router.lifespan_context(application):
        transport = ASGITransport(app=application)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy_with_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"] == __version__
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_unhealthy_without_database(self, client_without_database):
        response = await client_without_database.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestWithoutDatabase:

    @pytest.mark.asyncio
    async def test_list_fails_with_500_envelope(self, client_without_database):
        response = await client_without_database.get("/notes")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Error retrieving notes"
        assert "DATABASE_URL" in body["error"]

    @pytest.mark.asyncio
    async def test_create_fails_with_500_envelope(self, client_without_database):
        response = await client_without_database.post("/notes", json={"title": "a", "content": "b"})

        assert response.status_code == 500
        assert response.json()["message"] == "Error creating note"

    @pytest.mark.asyncio
    async def test_validation_still_runs_first(self, client_without_database):
        response = await client_without_database.post("/notes", json={"title": "a"})

        assert response.status_code == 400
