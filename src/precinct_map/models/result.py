"""Result model — one candidate's vote tally for one office in one precinct."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from precinct_map.models.base import Base


class Result(Base):
    """Per-precinct election result row.

    ``pctkey`` refers to ``precincts.pctkey`` but is not a foreign key;
    results for precincts missing from the GeoJSON are kept. Duplicate CSV
    rows are stored as separate rows.
    """

    __tablename__ = "results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pctkey: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    office: Mapped[str | None] = mapped_column(String, nullable=True)
    candidate: Mapped[str | None] = mapped_column(String, nullable=True)
    # Raw CSV text is bound as-is; SQLite integer affinity stores numeric text as INTEGER.
    votes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    party: Mapped[str | None] = mapped_column(String, nullable=True)
