"""Shared pytest fixtures: a fresh SQLite schema per test, sessions and an HTTP client."""

import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path

# Must be set before app.settings is imported anywhere
_DB_DIR = tempfile.mkdtemp(prefix="plan-share-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_DB_DIR) / 'test.sqlite'}"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import Base, async_session_maker, engine
from app.main import app as fastapi_app
from app.services.rate_limiter import auth_rate_limiter


@pytest_asyncio.fixture(autouse=True)
async def _schema() -> AsyncIterator[None]:
    """Recreate every table for each test, then release pooled connections."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    auth_rate_limiter.reset()

    yield

    # Connections must not outlive the test's event loop
    await engine.dispose()


@pytest_asyncio.fixture()
async def db() -> AsyncIterator[AsyncSession]:
    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture()
async def async_client() -> AsyncIterator[AsyncClient]:
    """Provide an HTTPX async client bound to the FastAPI app."""
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
