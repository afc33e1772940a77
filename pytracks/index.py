"""Master index lookups by public track id."""

import threading
from pathlib import Path

from ._errors import TrackNotFoundError, TrackSchemaError
from ._shared import CONFIG
from ._sqlite import INDEX_SQL, connect, execute
from ._types import IndexEntry
from .reader import TrackReader


class TrackIndex:
    """
    Long-lived read-only connection to ``root/tracks-index.db``.

    The connection is shared by all callers; statements are serialized with
    a lock so lookups may come from several threads.

    Raises
    ------
    TrackOpenError
        If the index file is missing or cannot be opened.
    """

    def __init__(self, root, path=None):
        self.root = Path(root)
        self.path = Path(path) if path is not None else self.root / CONFIG['index_file']
        self._lock = threading.Lock()
        self._conn = connect(self.path, check_same_thread=False)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def resolve(self, public_id):
        """
        Look up a track by its public id.

        Returns
        -------
        IndexEntry

        Raises
        ------
        TrackNotFoundError
            If no track has this id.
        TrackSchemaError
            If the index table or row does not have the expected shape.
        """
        with self._lock:
            if self._conn is None:
                raise ValueError(f"Track index {self.path} is closed")
            rows = execute(self._conn, INDEX_SQL, (str(public_id),), path=self.path)

        if not rows:
            raise TrackNotFoundError(f"track {public_id} not found")
        if len(rows) > 1:
            raise TrackSchemaError(f"Public id {public_id} appears {len(rows)} times in {self.path}")

        row = rows[0]
        public_id, platform, genome, name, reads, stat_mode, dir = row
        if (any(v is None for v in (public_id, platform, genome, name, dir))
                or not isinstance(reads, int) or not str(dir)):
            raise TrackSchemaError(f"Malformed index record in {self.path}: {row!r}")
        return IndexEntry(
            str(public_id), platform, genome, name, reads,
            "" if stat_mode is None else str(stat_mode), str(dir),
        )

    def reader_from_track_id(self, public_id, bin_width):
        """Resolve ``public_id`` and return a :class:`TrackReader` bound to it."""
        entry = self.resolve(public_id)
        return TrackReader(self.root, entry.track, bin_width, dir=entry.dir)
