"""Cascading filter endpoints: county -> jurisdiction -> district.

GET /filters — all counties
GET /jurisdictions?county= — jurisdictions within a county
GET /districts?county=&jurisdiction= — districts within a county and jurisdiction

The browser client sends its placeholder option text when nothing is
selected; those values are treated exactly like a missing parameter.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from precinct_map.core.dependencies import get_async_session, wait_for_data
from precinct_map.services import precinct_service

SELECT_COUNTY = "Select County"
SELECT_JURISDICTION = "Select Jurisdiction"
SELECT_DISTRICT = "Select District"


def selected(value: str | None, placeholder: str) -> str | None:
    """Return the filter value, or None when it is empty or the placeholder."""
    if not value or value == placeholder:
        return None
    return value


filters_router = APIRouter(tags=["filters"], dependencies=[Depends(wait_for_data)])


@filters_router.get("/filters", response_model=list[str])
async def get_counties(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> list[str]:
    """List every county, sorted."""
    return await precinct_service.list_counties(session)


@filters_router.get("/jurisdictions", response_model=list[str])
async def get_jurisdictions(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    county: str | None = Query(default=None, description="County to list jurisdictions for"),
) -> list[str]:
    """List the jurisdictions of a county; empty when no county is selected."""
    county = selected(county, SELECT_COUNTY)
    if county is None:
        return []
    return await precinct_service.list_jurisdictions(session, county)


@filters_router.get("/districts", response_model=list[str])
async def get_districts(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    county: str | None = Query(default=None, description="County"),
    jurisdiction: str | None = Query(default=None, description="Jurisdiction within the county"),
) -> list[str]:
    """List the districts of a county and jurisdiction; empty unless both are selected."""
    county = selected(county, SELECT_COUNTY)
    jurisdiction = selected(jurisdiction, SELECT_JURISDICTION)
    if county is None or jurisdiction is None:
        return []
    return await precinct_service.list_districts(session, county, jurisdiction)
