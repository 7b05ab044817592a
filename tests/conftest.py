"""
Shared test fixtures for the ESGenius test suite.

Async throughout (aiosqlite + AsyncSession). Every test gets a fresh
in-memory database.
"""

import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.pool import StaticPool

from esgenius.api.deps import (ADMIN_ROLES, get_current_active_user, get_db,
                               require_admin)
from esgenius.api.endpoints.auth import limiter
from esgenius.db.session import init_models
from esgenius.main import app
from esgenius.models.user import User

limiter.enabled = False


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database with all tables, shared by app and test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_models(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory
    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


# ── Auth Overrides ──────────────────────────────────────────────────
def _as(role: str):
    async def _override() -> User:
        return User(id=1, email=f"{role}@example.com", full_name=role, status="approved", role=role)

    return _override


@pytest.fixture
def as_role():
    """Switch the authenticated user's role for the rest of the test."""

    def _switch(role: str) -> None:
        app.dependency_overrides[get_current_active_user] = _as(role)
        if role in ADMIN_ROLES:
            app.dependency_overrides[require_admin] = _as(role)
        else:
            # Let the real admin guard reject the overridden user
            app.dependency_overrides.pop(require_admin, None)

    return _switch


@pytest.fixture
async def async_client(session_factory, as_role) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app, authenticated as admin."""
    as_role("admin")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_current_active_user, None)
    app.dependency_overrides.pop(require_admin, None)


@pytest.fixture
async def anon_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Client with no auth overrides — exercises the real login flow."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
