"""Precinct service — cascading filter lookups, precinct features, and results."""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from precinct_map.models import Precinct, Result

DEBUG_SAMPLE_LIMIT = 20


@dataclass(frozen=True)
class DistrictGroup:
    """Precinct count for one county/jurisdiction/district combination."""

    county: str | None
    jurisdiction: str | None
    district: str | None
    count: int


async def list_counties(session: AsyncSession) -> list[str]:
    """Return distinct non-null counties, sorted alphabetically."""
    result = await session.execute(
        select(Precinct.county).where(Precinct.county.is_not(None)).distinct().order_by(Precinct.county)
    )
    return list(result.scalars().all())


async def list_jurisdictions(session: AsyncSession, county: str) -> list[str]:
    """Return distinct non-null jurisdictions within a county, sorted alphabetically."""
    result = await session.execute(
        select(Precinct.jurisdiction)
        .where(Precinct.county == county, Precinct.jurisdiction.is_not(None))
        .distinct()
        .order_by(Precinct.jurisdiction)
    )
    return list(result.scalars().all())


async def list_districts(session: AsyncSession, county: str, jurisdiction: str) -> list[str]:
    """Return distinct non-null districts within a county and jurisdiction, sorted alphabetically."""
    result = await session.execute(
        select(Precinct.district)
        .where(
            Precinct.county == county,
            Precinct.jurisdiction == jurisdiction,
            Precinct.district.is_not(None),
        )
        .distinct()
        .order_by(Precinct.district)
    )
    return list(result.scalars().all())


async def list_precincts(
    session: AsyncSession,
    *,
    county: str | None = None,
    jurisdiction: str | None = None,
    district: str | None = None,
) -> list[Precinct]:
    """List precincts matching every filter that is set.

    Args:
        session: Database session.
        county: Exact county match.
        jurisdiction: Exact jurisdiction match.
        district: Exact district match.

    Returns:
        Matching Precinct rows, geometry still serialized.
    """
    query = select(Precinct)
    if county is not None:
        query = query.where(Precinct.county == county)
    if jurisdiction is not None:
        query = query.where(Precinct.jurisdiction == jurisdiction)
    if district is not None:
        query = query.where(Precinct.district == district)

    logger.debug(f"Fetching precincts (county={county!r}, jurisdiction={jurisdiction!r}, district={district!r})")
    result = await session.execute(query)
    precincts = list(result.scalars().all())
    logger.info(f"Returning {len(precincts)} precincts")
    return precincts


async def list_results(session: AsyncSession, pctkey: str) -> list[Result]:
    """Return every result row for a precinct key, unsorted and unaggregated."""
    result = await session.execute(select(Result).where(Result.pctkey == pctkey))
    return list(result.scalars().all())


async def get_district_groups(session: AsyncSession, limit: int = DEBUG_SAMPLE_LIMIT) -> list[DistrictGroup]:
    """Return up to ``limit`` county/jurisdiction/district groups with their precinct counts."""
    result = await session.execute(
        select(Precinct.county, Precinct.jurisdiction, Precinct.district, func.count())
        .group_by(Precinct.county, Precinct.jurisdiction, Precinct.district)
        .order_by(Precinct.county, Precinct.jurisdiction, Precinct.district)
        .limit(limit)
    )
    return [
        DistrictGroup(county=county, jurisdiction=jurisdiction, district=district, count=count)
        for county, jurisdiction, district, count in result.all()
    ]
