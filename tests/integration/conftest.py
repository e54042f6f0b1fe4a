"""Pytest fixtures aligned with the live Postgres stack."""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel


def _load_database_url() -> str:
    """Resolve the database URL for tests, enforcing an explicit opt-in."""
    test_db_url = os.getenv("TEST_DATABASE_URL")
    pytest_allow_db = int(os.getenv("PYTEST_ALLOW_DB", "0"))
    if not test_db_url:
        pytest.skip("No TEST_DATABASE_URL is configured for tests.")
    if pytest_allow_db != 1:
        raise RuntimeError(
            "Running integration tests requires setting PYTEST_ALLOW_DB=1 to"
            " confirm the configured database is safe to mutate."
        )
    # mypy: test_db_url is str after the guard above
    return test_db_url  # type: ignore[return-value]


@pytest.fixture(scope="session")
def database_url() -> str:
    """Return the Postgres URL the test suite should target."""
    return _load_database_url()


@pytest_asyncio.fixture()
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Yield an engine over freshly created league tables."""
    # Ensure SQLModel metadata is populated before creating tables.
    from app.schemas import auth, matches, players, seasons  # noqa: F401

    engine = create_async_engine(database_url, echo=False, pool_pre_ping=True)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
        await engine.dispose()


@pytest.fixture()
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture()
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting data; helpers commit their writes."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest_asyncio.fixture()
async def app_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get their own session, as in production."""
    try:
        from app.main import app
    except ValidationError as exc:  # pragma: no cover - guard for misconfigured env
        pytest.skip(f"App configuration failed: {exc}")

    from app.services.rankings_cache import RankingsCache
    from app.utils.db_async import get_session

    async def _get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _get_session_override
    app.state.rankings_cache = RankingsCache()
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_session, None)
