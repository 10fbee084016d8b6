"""Async database engine, session management, and schema reset.

Provides async engine creation, session factory, and lifecycle helpers
using SQLAlchemy 2.x with aiosqlite.
"""

from pathlib import Path

from loguru import logger
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from precinct_map.models import Base

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the current async engine.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _engine is None:
        msg = "Database engine not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the current session factory.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _session_factory is None:
        msg = "Session factory not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _session_factory


def ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of an on-disk SQLite database file.

    Args:
        database_url: SQLAlchemy connection string. Non-SQLite and in-memory
            URLs are ignored.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def init_engine(database_url: str, **kwargs: object) -> AsyncEngine:
    """Create and store the async engine and session factory.

    Args:
        database_url: SQLAlchemy async connection string.
        **kwargs: Additional arguments passed to create_async_engine.

    Returns:
        The created async engine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    ensure_sqlite_directory(database_url)
    _engine = create_async_engine(database_url, **kwargs)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


async def dispose_engine() -> None:
    """Dispose of the async engine and release connections."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def reset_schema(engine: AsyncEngine) -> bool:
    """Drop and recreate the precincts and results tables.

    All existing rows are discarded. Failures are logged and reported through
    the return value; they never propagate, so the server keeps running with
    whatever schema is left behind.

    Args:
        engine: Engine bound to the store.

    Returns:
        True when both tables were recreated.
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError:
        logger.exception("Failed to recreate precincts/results tables")
        return False
    logger.info(f"Tables recreated: {', '.join(sorted(Base.metadata.tables))}")
    return True
