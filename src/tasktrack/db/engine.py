"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode: create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.
Postgres (asyncpg) in production; SQLite (aiosqlite) for local runs and tests.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tasktrack.config import settings


def build_engine(database_url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an engine for the given URL.

    Pool sizing only applies to server databases. SQLite connections get
    foreign keys switched on so ON DELETE CASCADE behaves like Postgres.
    """
    is_sqlite = database_url.startswith("sqlite")
    if not is_sqlite:
        # Connection pool: min 5, max 20 connections.
        kwargs.setdefault("pool_size", 5)
        kwargs.setdefault("max_overflow", 15)
        kwargs.setdefault("pool_pre_ping", True)

    new_engine = create_async_engine(database_url, echo=echo, **kwargs)

    if is_sqlite:
        @event.listens_for(new_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url, echo=settings.debug)

# Session factory: each request gets its own session.
async_session_factory = build_session_factory(engine)


async def get_db() -> AsyncSession:
    """FastAPI dependency: yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        yield session
