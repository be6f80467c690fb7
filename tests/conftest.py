"""Pytest configuration and fixtures."""

from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from stt_service.db.models import Base
from stt_service.db.session import get_db
from stt_service.main import app
from stt_service.schemas.schemas import CurrentUser

# In-memory SQLite shared by every connection of the test engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_auth_headers(
    db_session: AsyncSession,
) -> Callable[[str], Awaitable[dict]]:
    """Factory issuing an API key for an owner and returning auth headers."""
    from stt_service.auth.security import create_api_key

    async def _make(owner: str) -> dict:
        _, full_key = await create_api_key(db_session, name=f"{owner} key", owner=owner)
        await db_session.commit()
        return {"Authorization": f"Bearer {full_key}"}

    return _make


@pytest_asyncio.fixture
async def auth_headers(make_auth_headers) -> dict:
    """Auth headers acting as user-1."""
    return await make_auth_headers("user-1")


@pytest_asyncio.fixture
async def other_auth_headers(make_auth_headers) -> dict:
    """Auth headers acting as user-2."""
    return await make_auth_headers("user-2")


@pytest.fixture
def alice() -> CurrentUser:
    return CurrentUser(id="alice")


@pytest.fixture
def bob() -> CurrentUser:
    return CurrentUser(id="bob")
