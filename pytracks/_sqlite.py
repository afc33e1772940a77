"""Read-only SQLite helpers for track storage units."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path

import numpy as np

from ._errors import TrackOpenError, TrackSchemaError
from ._shared import CONFIG

METADATA_SQL = "SELECT public_id, name, reads, stat_mode FROM track"

SEGMENTS_SQL = """SELECT start_bin, end_bin, reads
    FROM track
    WHERE end_bin > ?1 AND start_bin <= ?2
    ORDER BY start_bin"""

INDEX_SQL = """SELECT public_id, platform, genome, name, reads, stat_mode, dir
    FROM tracks
    WHERE public_id = ?1"""


def connect(path, check_same_thread=True) -> sqlite3.Connection:
    """
    Open a storage unit read-only.

    Raises
    ------
    TrackOpenError
        If the file does not exist or SQLite cannot open it.
    """
    path = Path(path)
    if not path.is_file():
        raise TrackOpenError(f"Storage unit does not exist: {path}")
    uri = f"{path.resolve().as_uri()}?mode=ro"
    try:
        return sqlite3.connect(uri, uri=True, check_same_thread=check_same_thread)
    except sqlite3.Error as exc:
        raise TrackOpenError(f"Cannot open storage unit {path}: {exc}") from exc


@contextmanager
def scoped_connection(path):
    """Open ``path`` read-only for the duration of a ``with`` block."""
    conn = connect(path)
    try:
        yield conn
    finally:
        conn.close()


def execute(conn, sql, params=(), path=None):
    """Run ``sql`` and return all rows, translating SQLite errors."""
    try:
        return conn.execute(sql, params).fetchall()
    except sqlite3.OperationalError as exc:
        if str(exc).startswith("no such"):
            raise TrackSchemaError(f"Unexpected schema in {path}: {exc}") from exc
        raise TrackOpenError(f"Cannot read storage unit {path}: {exc}") from exc
    except sqlite3.DatabaseError as exc:
        raise TrackOpenError(f"Cannot read storage unit {path}: {exc}") from exc


def metadata_path(sample_dir) -> Path:
    return Path(sample_dir) / CONFIG['metadata_file']


def read_metadata(sample_dir) -> dict:
    """
    Read the single metadata record of a sample directory.

    Returns
    -------
    dict
        Keys ``public_id``, ``name``, ``reads`` and ``stat_mode``.

    Raises
    ------
    TrackOpenError
        If the metadata unit is missing or unreadable.
    TrackSchemaError
        If the unit does not hold exactly one well-formed record.
    """
    path = metadata_path(sample_dir)
    with scoped_connection(path) as conn:
        rows = execute(conn, METADATA_SQL, path=path)

    if len(rows) != 1:
        raise TrackSchemaError(
            f"Expected exactly one metadata record in {path}, found {len(rows)}"
        )
    public_id, name, reads, stat_mode = rows[0]
    if public_id is None or name is None or not isinstance(reads, int):
        raise TrackSchemaError(f"Malformed metadata record in {path}: {rows[0]!r}")
    return {
        "public_id": str(public_id),
        "name": str(name),
        "reads": reads,
        "stat_mode": "" if stat_mode is None else str(stat_mode),
    }


def query_segments(path, start_bin, end_bin) -> np.ndarray:
    """
    Return the run-length rows of a data unit intersecting a bin range.

    Parameters
    ----------
    path : str or Path
        Per-chromosome data unit.
    start_bin, end_bin : int
        Inclusive, zero-based bin range.

    Returns
    -------
    numpy.ndarray
        ``(n, 3)`` int64 array of ``start, end, count`` rows ordered by start.
    """
    with scoped_connection(path) as conn:
        rows = execute(conn, SEGMENTS_SQL, (int(start_bin), int(end_bin)), path=path)

    if not rows:
        return np.empty((0, 3), dtype=np.int64)
    for row in rows:
        if len(row) != 3 or not all(isinstance(v, int) for v in row):
            raise TrackSchemaError(f"Malformed run-length row in {path}: {row!r}")
    return np.array(rows, dtype=np.int64)
