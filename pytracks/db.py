"""Database initialization and session helpers."""

import contextlib
import warnings
from pathlib import Path

from . import _shared
from ._errors import TrackOpenError
from ._shared import _checkroot, db_default_root
from .catalog import TrackCatalog
from .index import TrackIndex


def db_init(path: str = None, index: bool = True):
    """
    Initialize connection to a track database.

    Scans the database root once, caching the metadata of every track, and
    opens the master index used to resolve public track ids. Must be called
    before any other ``track_*`` function.

    Parameters
    ----------
    path : str, optional
        Path to the database root. Defaults to the ``PYTRACKS_ROOT``
        environment variable.
    index : bool, default True
        Open the master index. When the index file is missing a warning is
        issued and lookups by public id are unavailable.

    Returns
    -------
    TrackCatalog
        The catalog built for this root.

    Raises
    ------
    ValueError
        If no path is given and ``PYTRACKS_ROOT`` is not set.
    FileNotFoundError
        If the database root does not exist.
    CatalogBuildError
        If the track hierarchy cannot be scanned.

    See Also
    --------
    db_unload : Disconnect from the database and clear all state.
    db_info : Return summary information about the database.

    Examples
    --------
    >>> import pytracks as pt
    >>> catalog = pt.db_init("/data/tracks")  # doctest: +SKIP
    >>> catalog.platforms()  # doctest: +SKIP
    ['ChIP-seq', 'RNA-seq']
    """
    if path is None:
        path = db_default_root()
        if path is None:
            raise ValueError(
                f"No database path given and {_shared.ROOT_ENV_VAR} is not set."
            )
    db_path = Path(path).expanduser()
    if not db_path.is_dir():
        raise FileNotFoundError(f"Database path does not exist: {path}")

    catalog = TrackCatalog.build(db_path)

    track_index = None
    if index:
        try:
            track_index = TrackIndex(db_path)
        except TrackOpenError as exc:
            warnings.warn(
                f"Track index not available, lookups by public id are disabled: {exc}",
                RuntimeWarning,
                stacklevel=2,
            )

    db_unload()
    _shared._ROOT = str(db_path)
    _shared._CATALOG = catalog
    _shared._INDEX = track_index
    return catalog


def db_unload():
    """
    Unload the database, clearing all state.

    Closes the master index and drops the cached catalog. After calling
    this function, a new :func:`db_init` call is required before any track
    operations.

    Examples
    --------
    >>> import pytracks as pt
    >>> pt.db_unload()
    """
    if _shared._INDEX is not None:
        with contextlib.suppress(Exception):
            _shared._INDEX.close()
    _shared._ROOT = None
    _shared._CATALOG = None
    _shared._INDEX = None


def db_root():
    """Return the root of the initialized database."""
    _checkroot()
    return _shared._ROOT


def db_info():
    """
    Return high-level information about the initialized database.

    Returns
    -------
    dict
        Dictionary with keys:

        - ``path`` (str) -- Database root.
        - ``num_platforms`` (int) -- Number of platforms.
        - ``num_genomes`` (int) -- Number of platform/genome pairs.
        - ``num_tracks`` (int) -- Number of tracks.
        - ``index`` (str or None) -- Path of the open master index.

    Raises
    ------
    DatabaseNotInitializedError
        If no database is currently initialized.

    Examples
    --------
    >>> import pytracks as pt
    >>> _ = pt.db_init("/data/tracks")  # doctest: +SKIP
    >>> pt.db_info()["num_tracks"]  # doctest: +SKIP
    12
    """
    _checkroot()
    catalog = _shared._CATALOG
    platforms = catalog.platforms()
    return {
        "path": _shared._ROOT,
        "num_platforms": len(platforms),
        "num_genomes": sum(len(catalog.genomes(p)) for p in platforms),
        "num_tracks": len(catalog),
        "index": str(_shared._INDEX.path) if _shared._INDEX is not None else None,
    }
