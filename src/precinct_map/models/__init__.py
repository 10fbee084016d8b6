"""ORM model registry — import all models so metadata create_all discovers them."""

from precinct_map.models.base import Base
from precinct_map.models.precinct import Precinct
from precinct_map.models.result import Result

__all__ = [
    "Base",
    "Precinct",
    "Result",
]
