"""Map data endpoints: precinct features and per-precinct results."""

import json
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from precinct_map.api.filters import SELECT_COUNTY, SELECT_DISTRICT, SELECT_JURISDICTION, selected
from precinct_map.core.dependencies import get_async_session, wait_for_data
from precinct_map.schemas.precinct import PrecinctFeature, PrecinctProperties, ResultResponse
from precinct_map.services import precinct_service

precincts_router = APIRouter(tags=["precincts"], dependencies=[Depends(wait_for_data)])


@precincts_router.get("/precincts", response_model=list[PrecinctFeature])
async def get_precincts(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    county: str | None = Query(default=None),
    jurisdiction: str | None = Query(default=None),
    district: str | None = Query(default=None),
) -> list[PrecinctFeature]:
    """Return matching precincts as GeoJSON Features.

    Every filter is optional; placeholder values mean no filter.
    """
    precincts = await precinct_service.list_precincts(
        session,
        county=selected(county, SELECT_COUNTY),
        jurisdiction=selected(jurisdiction, SELECT_JURISDICTION),
        district=selected(district, SELECT_DISTRICT),
    )
    return [
        PrecinctFeature(
            properties=PrecinctProperties.model_validate(p),
            geometry=json.loads(p.geometry) if p.geometry is not None else None,
        )
        for p in precincts
    ]


@precincts_router.get("/results", response_model=list[ResultResponse])
async def get_results(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    pctkey: str | None = Query(default=None, description="Precinct key"),
) -> list[ResultResponse]:
    """Return every result row for a precinct; empty when no key is given."""
    if not pctkey:
        return []
    results = await precinct_service.list_results(session, pctkey)
    return [ResultResponse.model_validate(r) for r in results]
