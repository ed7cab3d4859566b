"""Pytest configuration and fixtures for lounge tests."""
import os
import tempfile
from pathlib import Path

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(tempfile.mkdtemp()) / 'lounge_test.db'}"
os.environ["ENABLE_DEBUG_COMMANDS"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from lounge.handler import handle_command
from lounge.models import User
from lounge.models.base import init_db, make_session_factory
from web.api.main import app
from web.api.routes import get_session_factory


@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite file database per test, tables created."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'lounge.db'}")
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def run(session_factory):
    """Send a command line as a user: await run(user_id, "/nick Bob")."""

    async def _run(user_id: int, line: str, username: str = "tester") -> str:
        return await handle_command(user_id, username, line, session_factory)

    return _run


@pytest.fixture
def get_user(session_factory):
    """Read a user row straight from the database."""

    async def _get(user_id: int) -> User | None:
        async with session_factory() as session:
            return await session.get(User, user_id)

    return _get


@pytest.fixture
def set_user(session_factory):
    """Create or update a user row directly: await set_user(1, rank=2)."""

    async def _set(user_id: int, **fields) -> None:
        async with session_factory() as session:
            async with session.begin():
                user = await session.get(User, user_id)
                if user is None:
                    user = User(id=user_id, username=f"user{user_id}", karma=0, rank=0, banned=False, joined=True)
                    session.add(user)
                for key, value in fields.items():
                    setattr(user, key, value)

    return _set


@pytest.fixture
async def client(session_factory):
    """Async HTTP client for the API, bound to the per-test database."""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
