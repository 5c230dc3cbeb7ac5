"""Database session management."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy import event, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from flagstore.core.config import settings


def create_engine(database_url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """Create an async engine for the given URL.

    SQLite connections get WAL mode and a busy timeout so concurrent
    writers wait for the lock instead of failing. Foreign key enforcement
    is left off, which lets removed flag types orphan their links.

    Args:
        database_url: Connection URL. Defaults to the configured URL.
        echo: Log emitted SQL. Defaults to the debug setting.

    Returns:
        The async engine.
    """
    url = make_url(database_url or settings.database_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    kwargs: dict = {
        "echo": settings.debug if echo is None else echo,
        "future": True,
    }
    if is_sqlite:
        kwargs["connect_args"] = {"timeout": settings.sqlite_busy_timeout}
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_async_engine(url, **kwargs)

    if is_sqlite:
        busy_timeout_ms = settings.sqlite_busy_timeout * 1000

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Enable WAL mode for better concurrent access."""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
            cursor.close()

    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_engine()

async_session_maker = create_session_maker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that commits on success and rolls back on error.

    Yields:
        An async database session.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
