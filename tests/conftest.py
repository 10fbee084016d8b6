"""Shared test fixtures for settings, async database sessions, and source files."""

import json
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from precinct_map.core.config import Settings
from precinct_map.models import Base

SQUARE = {"type": "Polygon", "coordinates": [[[-96.8, 32.7], [-96.7, 32.7], [-96.7, 32.8], [-96.8, 32.7]]]}
MULTI = {
    "type": "MultiPolygon",
    "coordinates": [[[[-97.4, 32.7], [-97.3, 32.7], [-97.3, 32.8], [-97.4, 32.7]]]],
}


def write_geojson(path: Path, features: list[dict[str, Any]]) -> Path:
    """Write a FeatureCollection to ``path``."""
    path.write_text(json.dumps({"type": "FeatureCollection", "features": features}), encoding="utf-8")
    return path


def write_results_csv(path: Path, rows: list[list[str]]) -> Path:
    """Write a results CSV with the standard header to ``path``."""
    lines = ["pctkey,office,candidate,votes,party_simplified"] + [",".join(row) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def geojson_file(tmp_path: Path) -> Path:
    """Two-feature collection; the second feature has no pctkey and no city."""
    return write_geojson(
        tmp_path / "precincts.geojson",
        [
            {
                "type": "Feature",
                "properties": {"pctkey": "P1", "county": "Dallas", "city": "Dallas", "us_congress": 30},
                "geometry": SQUARE,
            },
            {"type": "Feature", "properties": {"county": "Tarrant"}, "geometry": MULTI},
        ],
    )


@pytest.fixture
def results_file(tmp_path: Path) -> Path:
    """Two result rows for precinct P1."""
    return write_results_csv(
        tmp_path / "results.csv",
        [
            ["P1", "Mayor", "A", "10", "X"],
            ["P1", "Mayor", "B", "20", "Y"],
        ],
    )


@pytest.fixture
def settings(tmp_path: Path, geojson_file: Path, results_file: Path) -> Settings:
    """Test application settings pointing at temporary files."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'db' / 'database.sqlite'}",
        precincts_geojson_path=str(geojson_file),
        results_csv_path=str(results_file),
        static_dir=None,
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine with both tables."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the in-memory engine."""
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    async with session_factory() as session:
        yield session
