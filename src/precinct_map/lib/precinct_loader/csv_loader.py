"""Chunked CSV reader for per-precinct election results.

Reads the results file in fixed-size chunks so it is never held in memory
whole. Every value is kept as the text found in the file (vote counts are
not converted); columns absent from the file come back as None.
"""

from collections.abc import Iterator
from pathlib import Path

import pandas as pd
from loguru import logger

RESULT_FIELDS: tuple[str, ...] = ("pctkey", "office", "candidate", "votes", "party")


def detect_encoding(file_path: Path) -> str:
    """Detect file encoding by attempting to read with common encodings.

    Args:
        file_path: Path to the CSV file.

    Returns:
        The detected encoding string.

    Raises:
        ValueError: If encoding cannot be detected.
    """
    for encoding in ("utf-8-sig", "latin-1"):
        try:
            with file_path.open("r", encoding=encoding) as f:
                f.read(8192)
            return encoding
        except UnicodeDecodeError:
            continue
    msg = f"Cannot detect encoding for {file_path}"
    raise ValueError(msg)


def build_column_map(party_column: str) -> dict[str, str]:
    """Map results CSV headers to result fields.

    Args:
        party_column: Header holding the party; a literal ``party`` column
            is used when this one is missing.
    """
    return {
        "pctkey": "pctkey",
        "office": "office",
        "candidate": "candidate",
        "votes": "votes",
        party_column: "party",
    }


def parse_result_chunks(
    file_path: Path,
    batch_size: int = 1000,
    party_column: str = "party_simplified",
) -> Iterator[list[dict[str, str | None]]]:
    """Parse a results CSV file in chunks.

    Args:
        file_path: Path to the CSV file.
        batch_size: Number of rows per chunk.
        party_column: CSV header mapped onto the ``party`` field.

    Yields:
        Lists of row dicts keyed by RESULT_FIELDS, in file order.
    """
    encoding = detect_encoding(file_path)
    logger.info(f"Parsing results {file_path} with encoding={encoding}, batch_size={batch_size}")

    reader = pd.read_csv(
        file_path,
        encoding=encoding,
        chunksize=batch_size,
        dtype=str,
        keep_default_na=False,
    )
    column_map = build_column_map(party_column)
    rename_map: dict[str, str] | None = None

    with reader:
        for chunk in reader:
            chunk.columns = chunk.columns.str.strip()

            if rename_map is None:
                rename_map = {col: column_map[col] for col in chunk.columns if col in column_map}
                if "party" not in rename_map.values() and "party" in chunk.columns:
                    rename_map["party"] = "party"
                missing = set(RESULT_FIELDS) - set(rename_map.values())
                if missing:
                    logger.warning(f"Results CSV has no column for {sorted(missing)}; storing them as NULL")

            chunk = chunk[list(rename_map)].rename(columns=rename_map)
            # Short rows leave NaN behind even with keep_default_na=False
            chunk = chunk.astype(object).where(chunk.notna(), None)

            records = chunk.to_dict(orient="records")
            yield [{field: record.get(field) for field in RESULT_FIELDS} for record in records]
