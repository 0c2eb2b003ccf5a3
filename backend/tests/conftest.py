"""
Notes API: Test Configuration (conftest.py)
============================================

Shared pytest fixtures.

Fixture Hierarchy (all function-scoped):
    ├── mock_repository: AsyncMock standing in for NoteRepository
    ├── sample_note: MagicMock shaped like a stored Note
    ├── database_url: SQLite file URL in the test's tmp_path
    ├── database: connected Database on that file
    ├── repository: NoteRepository on that Database
    ├── app: FastAPI app with its lifespan running
    └── test_client: HTTPX AsyncClient bound to the app
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep tests away from any developer .env database and quiet during runs
os.environ.pop("DATABASE_URL", None)
os.environ["LOG_LEVEL"] = "WARNING"

from notes_api.config import Settings  # noqa: E402
from notes_api.database import Database  # noqa: E402
from notes_api.repositories.note_repository import NoteRepository  # noqa: E402


@pytest.fixture
def mock_repository():
    """
    A NoteRepository double.

    Usage:
        mock_repository.find_by_id.return_value = sample_note
        await NoteService(mock_repository).get_note(str(sample_note.id))
    """
    repository = MagicMock(spec=NoteRepository)
    repository.create = AsyncMock()
    repository.find_all = AsyncMock(return_value=[])
    repository.find_by_id = AsyncMock(return_value=None)
    repository.save = AsyncMock(side_effect=lambda note: note)
    repository.delete_by_id = AsyncMock(return_value=True)
    return repository


@pytest.fixture
def sample_note():
    """A stored-note lookalike with fixed timestamps."""
    created = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    note = MagicMock()
    note.id = uuid4()
    note.title = "Shopping"
    note.content = "Milk, eggs"
    note.created_at = created
    note.updated_at = created
    return note


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    db = Database(database_url)
    assert await db.connect()
    yield db
    await db.dispose()


@pytest.fixture
def repository(database):
    return NoteRepository(database)


@pytest.fixture
def app_settings(database_url):
    return Settings(database_url=database_url, log_level="WARNING", _env_file=None)


@pytest_asyncio.fixture
async def app(app_settings):
    """
    A FastAPI app with its lifespan entered.

    ASGITransport does not send lifespan events, so startup/shutdown run
    through the router's lifespan context here.
    """
    from notes_api.main import create_app

    application = create_app(app_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
