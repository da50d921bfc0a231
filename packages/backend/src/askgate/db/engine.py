"""Async SQLAlchemy engine and session factory.

One engine with connection pooling for the whole process; each request
gets its own AsyncSession through the get_db dependency. Postgres
(asyncpg) is the deployment target. A sqlite+aiosqlite URL also works
for local runs, without the pool sizing.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from askgate.config import settings


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the process engine for database_url."""
    options: dict = {"echo": echo, "pool_pre_ping": True}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(pool_size=5, max_overflow=15)
    return create_async_engine(database_url, **options)


engine = build_engine(settings.database_url, echo=settings.debug)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """Yield one session per request."""
    async with async_session_factory() as session:
        yield session
