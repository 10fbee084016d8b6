"""Tests for the precinct query service against an in-memory database."""

import json

import pytest
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from precinct_map.models import Precinct, Result
from precinct_map.services import precinct_service
from tests.conftest import SQUARE

PRECINCTS = [
    {"pctkey": "P1", "county": "Dallas", "jurisdiction": "Garland", "district": "32"},
    {"pctkey": "P2", "county": "Dallas", "jurisdiction": "Dallas", "district": "30"},
    {"pctkey": "P3", "county": "Dallas", "jurisdiction": "Dallas", "district": "33"},
    {"pctkey": "P4", "county": "Dallas", "jurisdiction": "Dallas", "district": "30"},
    {"pctkey": "P5", "county": "Tarrant", "jurisdiction": "Arlington", "district": "6"},
    {"pctkey": "P6", "county": None, "jurisdiction": "Nowhere", "district": None},
]


@pytest.fixture
async def seeded_session(async_session: AsyncSession) -> AsyncSession:
    await async_session.execute(
        insert(Precinct), [{**row, "geometry": json.dumps(SQUARE)} for row in PRECINCTS]
    )
    await async_session.execute(
        insert(Result),
        [
            {"pctkey": "P1", "office": "Mayor", "candidate": "A", "votes": "10", "party": "X"},
            {"pctkey": "P1", "office": "Mayor", "candidate": "B", "votes": "20", "party": "Y"},
            {"pctkey": "P2", "office": "Mayor", "candidate": "A", "votes": "5", "party": "X"},
        ],
    )
    await async_session.commit()
    return async_session


class TestListCounties:
    """Tests for list_counties."""

    @pytest.mark.asyncio
    async def test_distinct_sorted_non_null(self, seeded_session: AsyncSession) -> None:
        assert await precinct_service.list_counties(seeded_session) == ["Dallas", "Tarrant"]

    @pytest.mark.asyncio
    async def test_empty_table(self, async_session: AsyncSession) -> None:
        assert await precinct_service.list_counties(async_session) == []


class TestListJurisdictions:
    """Tests for list_jurisdictions."""

    @pytest.mark.asyncio
    async def test_only_county_jurisdictions(self, seeded_session: AsyncSession) -> None:
        assert await precinct_service.list_jurisdictions(seeded_session, "Dallas") == ["Dallas", "Garland"]

    @pytest.mark.asyncio
    async def test_exact_match_only(self, seeded_session: AsyncSession) -> None:
        assert await precinct_service.list_jurisdictions(seeded_session, "dallas") == []
        assert await precinct_service.list_jurisdictions(seeded_session, "Dal") == []


class TestListDistricts:
    """Tests for list_districts."""

    @pytest.mark.asyncio
    async def test_distinct_sorted(self, seeded_session: AsyncSession) -> None:
        assert await precinct_service.list_districts(seeded_session, "Dallas", "Dallas") == ["30", "33"]

    @pytest.mark.asyncio
    async def test_unknown_pair_is_empty(self, seeded_session: AsyncSession) -> None:
        assert await precinct_service.list_districts(seeded_session, "Tarrant", "Garland") == []


class TestListPrecincts:
    """Tests for list_precincts."""

    @pytest.mark.asyncio
    async def test_no_filters_returns_all(self, seeded_session: AsyncSession) -> None:
        precincts = await precinct_service.list_precincts(seeded_session)
        assert {p.pctkey for p in precincts} == {row["pctkey"] for row in PRECINCTS}

    @pytest.mark.asyncio
    async def test_all_filters(self, seeded_session: AsyncSession) -> None:
        precincts = await precinct_service.list_precincts(
            seeded_session, county="Dallas", jurisdiction="Dallas", district="30"
        )
        assert sorted(p.pctkey for p in precincts) == ["P2", "P4"]

    @pytest.mark.asyncio
    async def test_single_filter(self, seeded_session: AsyncSession) -> None:
        precincts = await precinct_service.list_precincts(seeded_session, district="30")
        assert sorted(p.pctkey for p in precincts) == ["P2", "P4"]

    @pytest.mark.asyncio
    async def test_geometry_stays_serialized(self, seeded_session: AsyncSession) -> None:
        precincts = await precinct_service.list_precincts(seeded_session, county="Tarrant")
        assert json.loads(precincts[0].geometry) == SQUARE


class TestListResults:
    """Tests for list_results."""

    @pytest.mark.asyncio
    async def test_returns_all_rows_for_key(self, seeded_session: AsyncSession) -> None:
        results = await precinct_service.list_results(seeded_session, "P1")
        assert sorted((r.candidate, r.votes) for r in results) == [("A", 10), ("B", 20)]

    @pytest.mark.asyncio
    async def test_unknown_key_is_empty(self, seeded_session: AsyncSession) -> None:
        assert await precinct_service.list_results(seeded_session, "P404") == []


class TestGetDistrictGroups:
    """Tests for get_district_groups."""

    @pytest.mark.asyncio
    async def test_groups_with_counts(self, seeded_session: AsyncSession) -> None:
        groups = await precinct_service.get_district_groups(seeded_session)

        by_key = {(g.county, g.jurisdiction, g.district): g.count for g in groups}
        assert by_key[("Dallas", "Dallas", "30")] == 2
        assert by_key[("Tarrant", "Arlington", "6")] == 1
        assert len(groups) == 5

    @pytest.mark.asyncio
    async def test_limit(self, seeded_session: AsyncSession) -> None:
        assert len(await precinct_service.get_district_groups(seeded_session, limit=2)) == 2
