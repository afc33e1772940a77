"""
Shared globals and utilities for pytracks modules.

Thread-safety note:
The module-level state (`_ROOT`, `_CATALOG`, `_INDEX`) is set by `db_init`
and cleared by `db_unload`. Those two calls are not synchronized; call them
from a single controlling thread. Between them the catalog is immutable and
the index serializes its own statements, so lookups and queries may be
issued from any number of threads.
"""

import os as _os

from ._errors import DatabaseNotInitializedError

ROOT_ENV_VAR = "PYTRACKS_ROOT"

CONFIG = {
    'index_file': 'tracks-index.db',   # Master index at the database root
    'metadata_file': 'track.db',       # Per-sample metadata unit
    'db_suffix': '.db',                # Suffix of per-chromosome data units
}

# Global state
_ROOT = None     # Database root
_CATALOG = None  # TrackCatalog snapshot
_INDEX = None    # TrackIndex, or None when the root has no master index


def _checkroot():
    """Verify database is initialized."""
    if _ROOT is None or _CATALOG is None:
        raise DatabaseNotInitializedError('Database not set. Call db_init() first.')


def _checkindex():
    _checkroot()
    if _INDEX is None:
        raise DatabaseNotInitializedError(
            f"No track index is open for {_ROOT}. "
            f"Expected {CONFIG['index_file']} at the database root."
        )


def db_default_root():
    """Return the database root named by ``PYTRACKS_ROOT``, or None."""
    env = _os.environ.get(ROOT_ENV_VAR)
    return env or None
