"""
CodeCollab Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── make_project: builds detached Project rows with realistic values
    ├── database: fresh SQLite schema per test (tables created, then dropped)
    └── test_client: HTTPX AsyncClient wired to the FastAPI app over ASGI
"""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Point the app at a throwaway SQLite file BEFORE any codecollab import
_db_dir = tempfile.mkdtemp(prefix="codecollab_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir}/test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DB_CREATE_TABLES"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from codecollab.database import create_tables, dispose_engine, drop_tables
from codecollab.models.project import (
    DEFAULT_CSS_CODE,
    DEFAULT_HTML_CODE,
    DEFAULT_JS_CODE,
    Project,
)


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = project
            result = await project_service.get_project(mock_db_session, str(project.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_project():
    """Factory for detached Project instances (not attached to any session)."""

    def _make(**overrides) -> Project:
        now = datetime(2024, 1, 5, 9, 30, tzinfo=timezone.utc)
        values = {
            "id": uuid4(),
            "title": "Landing page",
            "description": "Hero section experiments",
            "is_public": False,
            "html_code": DEFAULT_HTML_CODE,
            "css_code": DEFAULT_CSS_CODE,
            "js_code": DEFAULT_JS_CODE,
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        return Project(**values)

    return _make


@pytest_asyncio.fixture
async def database():
    """Creates the schema before the test and drops it (and the pool) afterwards."""
    await create_tables()
    yield
    await drop_tables()
    # Pooled connections belong to this test's event loop
    await dispose_engine()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    from codecollab.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
