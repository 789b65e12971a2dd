from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leavedesk.api.deps import get_coordinator
from leavedesk.config import Settings
from leavedesk.db import build_engine, get_session, init_models
from leavedesk.main import app
from leavedesk.services.workflow import WorkflowCoordinator

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine

APPROVER_ID = "M1"
APPROVER_HEADERS = {"X-Person-Id": APPROVER_ID}


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """A fresh SQLite database per test, with tables created."""
    _engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'leave_desk.db'}")
    await init_models(_engine)
    yield _engine
    await _engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite+aiosqlite://", recheck_balance_on_approval=True)


@pytest.fixture
def coordinator(session_factory: async_sessionmaker[AsyncSession], settings: Settings) -> WorkflowCoordinator:
    return WorkflowCoordinator(session_factory, settings)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """A separate session for inspecting committed state."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(
    coordinator: WorkflowCoordinator,
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the per-test database, with approver M1 seeded."""
    await coordinator.add_person(APPROVER_ID, "Morgan Manager", 6, is_approver=True)

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
