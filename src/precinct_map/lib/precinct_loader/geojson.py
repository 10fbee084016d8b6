"""GeoJSON reader for precinct boundary FeatureCollections.

Maps feature properties onto precinct columns with fallbacks:

    pctkey       <- pctkey, else ``precinct_<zero-based feature index>``
    county       <- county, else "Unknown"
    jurisdiction <- city, else "Unknown"
    district     <- us_congress, state_senate, state_house (first present), else "Unknown"
    geometry     <- the feature geometry serialized to JSON text, unchanged
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

UNKNOWN = "Unknown"

DISTRICT_PROPERTIES: tuple[str, ...] = ("us_congress", "state_senate", "state_house")


@dataclass(frozen=True)
class PrecinctRecord:
    """A precinct row ready for insertion."""

    pctkey: str
    county: str
    jurisdiction: str
    district: str
    geometry: str | None

    def as_row(self) -> dict[str, str | None]:
        return {
            "pctkey": self.pctkey,
            "county": self.county,
            "jurisdiction": self.jurisdiction,
            "district": self.district,
            "geometry": self.geometry,
        }


def _first_present(*values: Any) -> Any | None:
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _as_text(value: Any) -> str:
    """Render a property value the way JSON text shows it: ``33.0`` -> ``"33"``, ``True`` -> ``"true"``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def feature_to_record(feature: dict[str, Any], index: int) -> PrecinctRecord:
    """Map one GeoJSON feature onto a precinct record.

    Args:
        feature: GeoJSON Feature object.
        index: Zero-based position of the feature in the collection.

    Returns:
        The mapped PrecinctRecord.
    """
    props = feature.get("properties") or {}

    pctkey = _first_present(props.get("pctkey"))
    county = _first_present(props.get("county"))
    jurisdiction = _first_present(props.get("city"))
    district = _first_present(*(props.get(name) for name in DISTRICT_PROPERTIES))
    geometry = feature.get("geometry")

    return PrecinctRecord(
        pctkey=_as_text(pctkey) if pctkey is not None else f"precinct_{index}",
        county=_as_text(county) if county is not None else UNKNOWN,
        jurisdiction=_as_text(jurisdiction) if jurisdiction is not None else UNKNOWN,
        district=_as_text(district) if district is not None else UNKNOWN,
        geometry=json.dumps(geometry) if geometry is not None else None,
    )


def read_geojson_features(file_path: Path) -> list[dict[str, Any]]:
    """Read a GeoJSON document fully into memory and return its features.

    Args:
        file_path: Path to the .geojson/.json file.

    Returns:
        The feature list, in file order.

    Raises:
        ValueError: If the document is not a FeatureCollection.
    """
    logger.info(f"Reading precinct GeoJSON: {file_path}")
    with file_path.open(encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        found = data.get("type") if isinstance(data, dict) else type(data).__name__
        msg = f"Expected FeatureCollection, got {found}"
        raise ValueError(msg)

    features = data.get("features") or []
    logger.info(f"Loaded GeoJSON with {len(features)} features")
    if features and isinstance(features[0], dict):
        logger.debug(f"Sample properties: {features[0].get('properties')}")
    return features

