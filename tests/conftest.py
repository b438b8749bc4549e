"""Test fixtures: a fresh in-memory SQLite database per test.

Learn: Each test gets its own engine (StaticPool keeps the single
in-memory connection alive), with the schema created up front. The app's
get_db dependency is overridden to open sessions on that engine, so every
HTTP request still gets its own session, like in production.

Env vars are set before anything from tasktrack is imported: the settings
singleton reads them at import time. bcrypt runs at its minimum cost so
the suite stays fast.
"""

import os
import uuid

os.environ.setdefault("TASKTRACK_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("TASKTRACK_BCRYPT_ROUNDS", "4")
os.environ.setdefault("TASKTRACK_AUTO_CREATE_TABLES", "false")
os.environ.setdefault("TASKTRACK_JWT_SECRET", "test-secret-with-enough-length-for-hs256")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from tasktrack.db.engine import build_engine, build_session_factory, get_db
from tasktrack.db.models import Base
from tasktrack.main import app
from tasktrack.services.user_store import UserStore


@pytest_asyncio.fixture()
async def engine():
    eng = build_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """Direct session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client running the real app (real auth) against the test DB."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """Register + login through the API.

    Returns (user_json, auth_headers).
    """

    async def _signup(name="Ana", email=None, password="secret1"):
        email = email or f"{name.lower()}-{uuid.uuid4().hex[:8]}@example.com"
        r = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert r.status_code == 201, r.text
        user = r.json()

        r = await client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        assert r.status_code == 200, r.text
        return user, {"Authorization": f"Bearer {r.json()['token']}"}

    return _signup


@pytest.fixture
def run_store(session_factory):
    """Run a UserStore call in its own short-lived session."""

    async def _run(fn):
        async with session_factory() as session:
            return await fn(UserStore(session))

    return _run
