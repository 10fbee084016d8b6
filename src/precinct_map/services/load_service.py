"""Load service — fills the precincts and results tables from the source files.

Rows are inserted in batches, one transaction per batch. A batch that
fails is replayed row by row so a single bad row only costs itself:
precinct key conflicts are skipped quietly, every other failure is logged
with the offending key and loading continues.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger
from sqlalchemy import func, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from precinct_map.core.config import Settings
from precinct_map.core.database import reset_schema
from precinct_map.lib.precinct_loader import feature_to_record, parse_result_chunks, read_geojson_features
from precinct_map.models import Precinct, Result

_PROGRESS_EVERY = 1000


@dataclass
class LoadSummary:
    """Outcome of loading one source file."""

    source: str
    processed: int = 0
    inserted: int = 0
    skipped: int = 0
    failed: int = 0
    error: str | None = None


@dataclass
class StartupLoadSummary:
    """Outcome of a full schema reset and reload."""

    schema_ready: bool
    precincts: LoadSummary
    results: LoadSummary
    precinct_total: int | None = None
    county_counts: dict[str, int] = field(default_factory=dict)


async def _insert_batch(
    session_factory: async_sessionmaker[AsyncSession],
    model: type[Precinct] | type[Result],
    rows: list[dict[str, Any]],
    summary: LoadSummary,
    *,
    ignore_conflicts: bool = False,
) -> None:
    """Insert a batch in one transaction, replaying it row by row on failure."""
    if not rows:
        return
    try:
        async with session_factory() as session, session.begin():
            await session.execute(insert(model), rows)
        summary.inserted += len(rows)
        return
    except SQLAlchemyError as exc:
        logger.debug(
            f"Batch of {len(rows)} {model.__tablename__} rows failed ({exc.__class__.__name__}), retrying per row"
        )

    for row in rows:
        try:
            async with session_factory() as session, session.begin():
                await session.execute(insert(model).values(**row))
        except IntegrityError as exc:
            if ignore_conflicts:
                summary.skipped += 1
                logger.debug(f"Skipping duplicate {model.__tablename__} key {row.get('pctkey')!r}")
                continue
            summary.failed += 1
            logger.error(f"Error inserting {model.__tablename__} row {row.get('pctkey')!r}: {exc.orig}")
        except SQLAlchemyError as exc:
            summary.failed += 1
            logger.error(f"Error inserting {model.__tablename__} row {row.get('pctkey')!r}: {exc}")
        else:
            summary.inserted += 1


def _batched(rows: Iterable[dict[str, Any]], batch_size: int) -> Iterable[list[dict[str, Any]]]:
    batch: list[dict[str, Any]] = []
    for row in rows:
        batch.append(row)
        if len(batch) >= batch_size:
            yield batch
            batch = []
    if batch:
        yield batch


async def load_precincts(
    session_factory: async_sessionmaker[AsyncSession],
    file_path: Path,
    *,
    batch_size: int = 1000,
) -> LoadSummary:
    """Load a precinct GeoJSON FeatureCollection into the precincts table.

    The whole document is parsed up front. Features whose pctkey repeats an
    already inserted key are skipped.

    Args:
        session_factory: Session factory bound to the store.
        file_path: Path to the GeoJSON file.
        batch_size: Rows per insert transaction.

    Returns:
        A LoadSummary; ``error`` is set when the file could not be read.
    """
    summary = LoadSummary(source=str(file_path))
    try:
        features = read_geojson_features(file_path)
    except (OSError, ValueError) as exc:
        logger.error(f"Error loading GeoJSON {file_path}: {exc}")
        summary.error = str(exc)
        return summary

    def _rows() -> Iterable[dict[str, Any]]:
        for index, feature in enumerate(features):
            summary.processed += 1
            if index % _PROGRESS_EVERY == 0:
                logger.info(f"Imported {index} precincts...")
            try:
                row = feature_to_record(feature, index).as_row()
            except (AttributeError, TypeError) as exc:
                summary.failed += 1
                logger.error(f"Error mapping precinct feature {index}: {exc}")
                continue
            yield row

    for batch in _batched(_rows(), batch_size):
        await _insert_batch(session_factory, Precinct, batch, summary, ignore_conflicts=True)

    logger.bind(json_output=True, **asdict(summary)).info(
        f"GeoJSON imported: {summary.processed} precincts "
        f"({summary.inserted} inserted, {summary.skipped} duplicate keys, {summary.failed} failed)"
    )
    return summary


async def load_results(
    session_factory: async_sessionmaker[AsyncSession],
    file_path: Path,
    *,
    batch_size: int = 1000,
    party_column: str = "party_simplified",
) -> LoadSummary:
    """Stream a results CSV into the results table.

    Rows are inserted as read; duplicates are kept and vote counts are
    stored as provided.

    Args:
        session_factory: Session factory bound to the store.
        file_path: Path to the results CSV.
        batch_size: Rows per chunk and per insert transaction.
        party_column: CSV header mapped onto ``party``.

    Returns:
        A LoadSummary; ``error`` is set when reading stopped early.
    """
    summary = LoadSummary(source=str(file_path))
    try:
        for chunk in parse_result_chunks(file_path, batch_size=batch_size, party_column=party_column):
            summary.processed += len(chunk)
            await _insert_batch(session_factory, Result, chunk, summary)
    except (OSError, ValueError) as exc:
        # pandas parser errors subclass ValueError
        logger.error(f"Error reading results CSV {file_path}: {exc}")
        summary.error = str(exc)

    logger.bind(json_output=True, **asdict(summary)).info(
        f"Results CSV imported: {summary.processed} records ({summary.failed} failed)"
    )
    return summary


async def count_precincts(session: AsyncSession) -> int:
    """Return the total number of precinct rows."""
    result = await session.execute(select(func.count()).select_from(Precinct))
    return result.scalar_one()


async def count_precincts_by_county(session: AsyncSession) -> dict[str, int]:
    """Return precinct row counts keyed by county, ordered by county."""
    result = await session.execute(
        select(Precinct.county, func.count()).group_by(Precinct.county).order_by(Precinct.county)
    )
    return {county: count for county, count in result.all()}


async def load_all(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    *,
    schema_ready: bool = True,
) -> StartupLoadSummary:
    """Load precincts then results, then log the verification counts.

    Args:
        session_factory: Session factory bound to the store.
        settings: Source paths and batch size.
        schema_ready: Result of the preceding schema reset, carried into the summary.

    Returns:
        The combined StartupLoadSummary.
    """
    precincts = await load_precincts(
        session_factory,
        settings.precincts_geojson_file,
        batch_size=settings.load_batch_size,
    )
    results = await load_results(
        session_factory,
        settings.results_csv_file,
        batch_size=settings.load_batch_size,
        party_column=settings.results_party_column,
    )
    summary = StartupLoadSummary(schema_ready=schema_ready, precincts=precincts, results=results)

    try:
        async with session_factory() as session:
            summary.precinct_total = await count_precincts(session)
            summary.county_counts = await count_precincts_by_county(session)
    except SQLAlchemyError:
        logger.exception("Failed to verify precinct counts")
        return summary

    logger.bind(
        json_output=True, precinct_total=summary.precinct_total, county_counts=summary.county_counts
    ).info(f"Total precincts in database: {summary.precinct_total}")
    logger.info("Counties in database:")
    for county, count in summary.county_counts.items():
        logger.info(f"  {county}: {count} precincts")
    return summary


async def reset_and_load(
    engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> StartupLoadSummary:
    """Drop and recreate both tables, then load both sources."""
    schema_ready = await reset_schema(engine)
    return await load_all(session_factory, settings, schema_ready=schema_ready)
