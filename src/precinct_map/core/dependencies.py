"""FastAPI dependency injection for database sessions and load readiness."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from precinct_map.core.background import InProcessTaskRunner
from precinct_map.core.config import Settings, get_settings
from precinct_map.core.database import get_session_factory


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    """Return the settings the app was created with, falling back to the environment."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


def get_task_runner(request: Request) -> InProcessTaskRunner | None:
    """Return the app's background runner, or None when no load was scheduled."""
    return getattr(request.app.state, "task_runner", None)


async def wait_for_data(request: Request) -> None:
    """Hold a data request until the startup load has finished.

    Skipped when ``serve_before_load`` is enabled or no load was scheduled.
    """
    runner = get_task_runner(request)
    if runner is None or get_app_settings(request).serve_before_load:
        return
    await runner.wait_idle()
