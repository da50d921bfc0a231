"""Test fixtures — fresh in-memory database and app per test.

Each test gets:
1. Its own SQLite (aiosqlite) in-memory engine with the tables created
   from the models, so nothing leaks between tests.
2. An app from create_app() with test settings (cheap bcrypt rounds,
   fixed JWT secret) and a FakeUpstream standing in for Gemini.
3. get_db overridden to hand out the test session.

The FakeUpstream records every call, which is how tests prove that an
upstream call did (or did not) happen.
"""

from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from askgate.config import Settings
from askgate.db.engine import get_db
from askgate.db.models import Base
from askgate.main import create_app

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-do-not-use"


class FakeUpstream:
    """Stands in for GeminiChat: returns a canned answer or raises."""

    def __init__(self, answer: str = "Hello from Gemini", error: Optional[Exception] = None):
        self.answer = answer
        self.error = error
        self.calls: list[dict] = []

    async def send(self, history: list[dict], question: str) -> str:
        self.calls.append({"history": history, "question": question})
        if self.error is not None:
            raise self.error
        return self.answer


class StubUpstreamError(Exception):
    """Looks like a google.api_core error: HTTP status in .code, text in .message."""

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        super().__init__(*([message] if message else []))
        self.message = message
        self.code = code


@pytest.fixture()
def settings():
    return Settings(
        _env_file=None,
        jwt_secret=TEST_JWT_SECRET,
        jwt_expire="1h",
        bcrypt_rounds=4,
        static_dir="",
    )


@pytest.fixture()
def upstream():
    return FakeUpstream()


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(db_engine):
    async with AsyncSession(db_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture()
def app(settings, upstream, db_session):
    app = create_app(settings, upstream=upstream)

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register_user(
    client: AsyncClient,
    name: str = "Ana",
    email: str = "a@x.com",
    password: str = "secret123",
):
    """Register through the API and return the parsed response body."""
    r = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert r.status_code == 201, r.text
    return r.json()
