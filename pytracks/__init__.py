"""
pytracks - read binned genomic signal tracks from SQLite track databases
"""

__version__ = '0.1.0'

from . import _shared
from ._errors import (
    CatalogBuildError,
    DatabaseNotInitializedError,
    SegmentOrderError,
    TrackError,
    TrackNotFoundError,
    TrackOpenError,
    TrackSchemaError,
)
from ._shared import CONFIG, db_default_root
from ._types import (
    AllTracks,
    BinCounts,
    IndexEntry,
    Location,
    RunLengthSegment,
    Track,
    TrackGenome,
    TrackInfo,
    TrackPlatform,
)
from .catalog import TrackCatalog
from .db import db_info, db_init, db_root, db_unload
from .index import TrackIndex
from .reader import TrackReader, bin_range, decode_segments
from .tracks import (
    track_all,
    track_bin_counts,
    track_genomes,
    track_info,
    track_ls,
    track_platforms,
    track_reader,
    track_reader_from_id,
    track_resolve,
    track_table,
)


def __getattr__(name):
    # Expose live DB state variables instead of stale import-time snapshots.
    if name in {"_ROOT", "_CATALOG", "_INDEX"}:
        return getattr(_shared, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Configuration
    'CONFIG',
    'db_default_root',
    # Errors
    'CatalogBuildError',
    'DatabaseNotInitializedError',
    'SegmentOrderError',
    'TrackError',
    'TrackNotFoundError',
    'TrackOpenError',
    'TrackSchemaError',
    # Records
    'AllTracks',
    'BinCounts',
    'IndexEntry',
    'Location',
    'RunLengthSegment',
    'Track',
    'TrackGenome',
    'TrackInfo',
    'TrackPlatform',
    # Storage access
    'TrackCatalog',
    'TrackIndex',
    'TrackReader',
    'bin_range',
    'decode_segments',
    # Database
    'db_info',
    'db_init',
    'db_root',
    'db_unload',
    # Tracks
    'track_all',
    'track_bin_counts',
    'track_genomes',
    'track_info',
    'track_ls',
    'track_platforms',
    'track_reader',
    'track_reader_from_id',
    'track_resolve',
    'track_table',
]
