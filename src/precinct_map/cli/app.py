"""Typer CLI root application with serve and load commands."""

import asyncio

import typer
from loguru import logger

from precinct_map.core.config import Settings, get_settings
from precinct_map.core.logging import setup_logging

app = typer.Typer(name="precinct-map", help="Precinct map data server CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(3000, "--port", envvar="PORT", help="Bind port"),
) -> None:
    """Start the API server (recreates and reloads the tables on startup)."""
    import uvicorn

    logger.info(f"Server running at http://localhost:{port}")
    uvicorn.run(
        "precinct_map.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


async def _run_load(settings: Settings) -> None:
    from precinct_map.core.database import dispose_engine, get_session_factory, init_engine
    from precinct_map.services.load_service import reset_and_load

    engine = init_engine(settings.database_url)
    try:
        summary = await reset_and_load(engine, get_session_factory(), settings)
    finally:
        await dispose_engine()

    for loaded in (summary.precincts, summary.results):
        status = f"error: {loaded.error}" if loaded.error else "ok"
        typer.echo(
            f"{loaded.source}: {loaded.processed} processed, {loaded.inserted} inserted, "
            f"{loaded.skipped} skipped, {loaded.failed} failed ({status})"
        )
    typer.echo(f"Total precincts in database: {summary.precinct_total}")
    for county, count in summary.county_counts.items():
        typer.echo(f"  {county}: {count} precincts")

    if not summary.schema_ready or summary.precincts.error or summary.results.error:
        raise typer.Exit(code=1)


@app.command()
def load() -> None:
    """Drop and recreate the tables, then load both source files once."""
    asyncio.run(_run_load(get_settings()))
