"""Precinct model — voting precinct boundary with its filter attributes.

Populated once per startup from the precinct GeoJSON. Feature property
mapping:
    pctkey                                -> pctkey
    county                                -> county
    city                                  -> jurisdiction
    us_congress / state_senate / state_house -> district (first present)
    geometry (serialized as JSON text)    -> geometry
"""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from precinct_map.models.base import Base


class Precinct(Base):
    """A voting precinct and its boundary shape."""

    __tablename__ = "precincts"

    pctkey: Mapped[str] = mapped_column(String, primary_key=True)
    county: Mapped[str | None] = mapped_column(String, nullable=True)
    jurisdiction: Mapped[str | None] = mapped_column(String, nullable=True)
    district: Mapped[str | None] = mapped_column(String, nullable=True)
    geometry: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_precincts_county_jurisdiction_district", "county", "jurisdiction", "district"),)
