"""Precinct loader library — reads the precinct GeoJSON and results CSV sources.

Public API:
    - read_geojson_features: Read a FeatureCollection fully into memory
    - feature_to_record: Map one feature onto precinct columns with fallbacks
    - PrecinctRecord: Mapped precinct row
    - parse_result_chunks: Stream the results CSV in chunks of row dicts
"""

from precinct_map.lib.precinct_loader.csv_loader import RESULT_FIELDS, parse_result_chunks
from precinct_map.lib.precinct_loader.geojson import (
    UNKNOWN,
    PrecinctRecord,
    feature_to_record,
    read_geojson_features,
)

__all__ = [
    "RESULT_FIELDS",
    "UNKNOWN",
    "PrecinctRecord",
    "feature_to_record",
    "parse_result_chunks",
    "read_geojson_features",
]
