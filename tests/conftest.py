"""
Shared test configuration.

Tests run against an in-memory SQLite database through aiosqlite,
with foreign key enforcement switched on.
Environment variables are set before the application is imported so
that settings, the engine and the auth service pick them up.
"""

import os
from typing import Dict

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["APP_ENV"] = "test"
os.environ["IP_SALT"] = "test-salt"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.database import Base, get_db, get_session_factory
from app.main import app
from app.services.rate_limiter import rate_limiter
from tests.factories import create_category, create_course, create_platform, make_token


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client wired to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    rate_limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    rate_limiter.reset()


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def user_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(is_admin=False)}"}


@pytest_asyncio.fixture
async def catalog(db):
    """One platform, one category and one active course."""
    platform = await create_platform(db)
    category = await create_category(db)
    course = await create_course(db, platform, category)
    return {"platform": platform, "category": category, "course": course}
