"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and the static map client mount.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from precinct_map.core.background import InProcessTaskRunner
from precinct_map.core.config import Settings, get_settings
from precinct_map.core.database import dispose_engine, get_session_factory, init_engine, reset_schema
from precinct_map.core.logging import setup_logging
from precinct_map.services.load_service import load_all

STARTUP_LOAD_JOB = "startup-load"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Init engine, reset the schema and start the background load; dispose on shutdown."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)
    engine = init_engine(settings.database_url, echo=False)
    logger.info(f"Database connected: {settings.database_location}")

    runner: InProcessTaskRunner | None = None
    if settings.load_on_startup:
        schema_ready = await reset_schema(engine)
        runner = InProcessTaskRunner()
        runner.submit_task(STARTUP_LOAD_JOB, load_all(get_session_factory(), settings, schema_ready=schema_ready))
        if settings.serve_before_load:
            logger.warning("serve_before_load is enabled; requests may see partially loaded tables")
    app.state.task_runner = runner

    yield

    if runner is not None:
        await runner.cancel_all()
    await dispose_engine()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; read from the environment when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Precinct Map API",
        description="Precinct boundaries and election results for the precinct map client",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.task_runner = None

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        message = str(exc.orig) if isinstance(exc, DBAPIError) else str(exc)
        logger.error(f"Query failed for {request.url.path}: {message}")
        return JSONResponse(
            status_code=500,
            content={"error": message},
        )

    from precinct_map.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    if settings.static_dir and Path(settings.static_dir).is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app
