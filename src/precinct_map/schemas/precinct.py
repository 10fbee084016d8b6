"""Pydantic v2 schemas for precinct, result, and diagnostic responses."""

from typing import Any

from pydantic import BaseModel, Field


class PrecinctProperties(BaseModel):
    """Identifying fields of a precinct feature."""

    model_config = {"from_attributes": True}

    pctkey: str
    county: str | None = None
    jurisdiction: str | None = None
    district: str | None = None


class PrecinctFeature(BaseModel):
    """A single GeoJSON Feature for one precinct."""

    type: str = "Feature"
    properties: PrecinctProperties
    geometry: Any = None


class ResultResponse(BaseModel):
    """One candidate's tally for one office in one precinct."""

    model_config = {"from_attributes": True}

    pctkey: str | None = None
    office: str | None = None
    candidate: str | None = None
    votes: int | str | None = None
    party: str | None = None


class DistrictGroupResponse(BaseModel):
    """Precinct count for a county/jurisdiction/district combination."""

    model_config = {"from_attributes": True}

    county: str | None = None
    jurisdiction: str | None = None
    district: str | None = None
    count: int


class DebugSummaryResponse(BaseModel):
    """Operator diagnostic: grouped precinct sample and store location."""

    model_config = {"populate_by_name": True}

    precinct_count: int = Field(alias="precinctCount")
    sample_data: list[DistrictGroupResponse] = Field(alias="sampleData")
    database: str


class LoadStatusResponse(BaseModel):
    """Whether the startup load has finished, with per-job status."""

    ready: bool
    jobs: dict[str, str]


class ErrorResponse(BaseModel):
    """Body returned for failed queries."""

    error: str
