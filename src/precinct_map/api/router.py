"""Root API router with the configured prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from precinct_map.api.middleware import SecurityHeadersMiddleware, setup_cors
from precinct_map.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from precinct_map.api.diagnostics import diagnostics_router
    from precinct_map.api.filters import filters_router
    from precinct_map.api.precincts import precincts_router

    root_router = APIRouter(prefix=settings.api_prefix)
    root_router.include_router(filters_router)
    root_router.include_router(precincts_router)
    root_router.include_router(diagnostics_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)
