"""Operator diagnostics: grouped precinct sample and load readiness."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from precinct_map.core.background import InProcessTaskRunner
from precinct_map.core.config import Settings
from precinct_map.core.dependencies import get_app_settings, get_async_session, get_task_runner, wait_for_data
from precinct_map.schemas.precinct import DebugSummaryResponse, DistrictGroupResponse, LoadStatusResponse
from precinct_map.services import precinct_service

diagnostics_router = APIRouter(tags=["diagnostics"])


@diagnostics_router.get("/debug", response_model=DebugSummaryResponse, dependencies=[Depends(wait_for_data)])
async def get_debug_summary(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> DebugSummaryResponse:
    """Up to 20 county/jurisdiction/district groups with precinct counts."""
    groups = await precinct_service.get_district_groups(session)
    return DebugSummaryResponse(
        precinct_count=len(groups),
        sample_data=[DistrictGroupResponse.model_validate(g) for g in groups],
        database=settings.database_location,
    )


@diagnostics_router.get("/status", response_model=LoadStatusResponse)
async def get_load_status(
    runner: Annotated[InProcessTaskRunner | None, Depends(get_task_runner)],
) -> LoadStatusResponse:
    """Report whether the startup load has finished. Never waits."""
    if runner is None:
        return LoadStatusResponse(ready=True, jobs={})
    return LoadStatusResponse(
        ready=runner.is_idle,
        jobs={name: str(status) for name, status in runner.statuses.items()},
    )
