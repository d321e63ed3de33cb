"""Pytest configuration and fixtures"""

import asyncio
import os
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import NullPool

# Default test database: a SQLite file so concurrent connections share state.
# Point DATABASE_URL at PostgreSQL to run the suite against it instead.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="convolog-tests-")
DEFAULT_TEST_DATABASE_URL = f"sqlite+aiosqlite:///{Path(_TEST_DB_DIR) / 'test.db'}"

os.environ.setdefault("DATABASE_URL", DEFAULT_TEST_DATABASE_URL)
os.environ.setdefault("LOG_LEVEL", "WARNING")

from core.config import get_settings  # noqa: E402

get_settings.cache_clear()

import models  # noqa: E402,F401
from core.database import Base, build_engine, build_session_maker, reset_engine  # noqa: E402
from storage.event_log import EventLog  # noqa: E402
from storage.session_store import SessionStore  # noqa: E402


def _database_url() -> str:
    return os.environ.get("DATABASE_URL", DEFAULT_TEST_DATABASE_URL)


@pytest.fixture(scope="session", autouse=True)
def verify_postgres():
    """Verify PostgreSQL is running when the suite targets it"""
    database_url = _database_url()
    if "postgresql" not in database_url:
        return

    from sqlalchemy import text

    async def _check():
        engine = build_engine(database_url, poolclass=NullPool)
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        await engine.dispose()

    try:
        asyncio.run(_check())
    except Exception as e:
        pytest.skip(f"PostgreSQL not available: {e}. Run 'docker-compose up' first.")


@pytest.fixture(scope="function")
async def db_engine():
    """Create test database engine with empty tables"""
    database_url = _database_url()
    engine_kwargs: dict = {"poolclass": NullPool}

    if database_url.startswith("sqlite"):
        # Concurrent writers wait on the file lock instead of failing fast
        engine_kwargs["connect_args"] = {"timeout": 30}

    engine = build_engine(database_url, **engine_kwargs)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(autouse=True, scope="function")
def reset_db_engine():
    """Reset cached engine between tests"""
    reset_engine()
    yield
    reset_engine()


@pytest.fixture(scope="function")
async def db_session_maker(db_engine):
    """Create test database session maker"""
    return build_session_maker(db_engine)


@pytest.fixture(scope="function")
async def db_session(db_session_maker):
    """Create test database session"""
    async with db_session_maker() as session:
        yield session


@pytest.fixture
def session_store(db_session_maker) -> SessionStore:
    return SessionStore(db_session_maker)


@pytest.fixture
def event_log(db_session_maker, session_store) -> EventLog:
    return EventLog(db_session_maker, session_store, max_limit=100)


@pytest.fixture(scope="function")
async def client(db_session_maker):
    """Create async test client"""
    from asgi_lifespan import LifespanManager
    from httpx import ASGITransport, AsyncClient

    from app.dependencies import get_session_factory
    from app.main import app

    app.dependency_overrides[get_session_factory] = lambda: db_session_maker

    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as test_client:
            yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def mock_db():
    """Mock database session for testing"""
    mock = AsyncMock(spec=AsyncSession)
    mock.__aenter__.return_value = mock
    mock.execute = AsyncMock()
    mock.commit = AsyncMock()
    mock.rollback = AsyncMock()
    return mock


@pytest.fixture
def mock_session_maker(mock_db):
    """Session factory yielding mock_db"""
    return Mock(return_value=mock_db)
