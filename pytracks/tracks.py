"""Track listing, lookup and bin-count queries on the initialized database."""

from . import _shared
from ._shared import _checkindex, _checkroot


def track_platforms():
    """
    Return the platform names in the database.

    Returns
    -------
    list of str
        Platform names in lexicographic order.

    See Also
    --------
    track_genomes : Genomes of one platform.
    track_all : Full nested listing.

    Examples
    --------
    >>> import pytracks as pt
    >>> _ = pt.db_init("/data/tracks")  # doctest: +SKIP
    >>> pt.track_platforms()  # doctest: +SKIP
    ['ChIP-seq', 'RNA-seq']
    """
    _checkroot()
    return _shared._CATALOG.platforms()


def track_genomes(platform):
    """
    Return the genome assemblies available for ``platform``.

    Raises
    ------
    TrackNotFoundError
        If the platform does not exist.
    """
    _checkroot()
    return _shared._CATALOG.genomes(platform)


def track_ls(platform, genome, *patterns, ignore_case=False):
    """
    Return the tracks of a platform and genome.

    Track names are matched against every regex pattern given; only tracks
    matching all patterns are returned.

    Parameters
    ----------
    platform : str
        Platform name.
    genome : str
        Genome assembly.
    *patterns : str
        Regex patterns applied to track names.
    ignore_case : bool, default False
        If True, pattern matching is case-insensitive.

    Returns
    -------
    list of TrackInfo
        Matching tracks ordered by name. Empty if nothing matches.

    Raises
    ------
    TrackNotFoundError
        If the platform or genome does not exist.
    ValueError
        If a regex pattern is invalid.

    Examples
    --------
    >>> import pytracks as pt
    >>> _ = pt.db_init("/data/tracks")  # doctest: +SKIP
    >>> [t.name for t in pt.track_ls("ChIP-seq", "hg19", "^CB")]  # doctest: +SKIP
    ['CB4_BCL6', 'CB5_BCL6']
    """
    _checkroot()
    return _shared._CATALOG.search(platform, genome, *patterns, ignore_case=ignore_case)


def track_all():
    """Return the nested platform -> genome -> track listing as :class:`AllTracks`."""
    _checkroot()
    return _shared._CATALOG.all_tracks()


def track_table():
    """
    Return every track as a DataFrame.

    Returns
    -------
    pandas.DataFrame
        Columns ``platform``, ``genome``, ``name``, ``public_id``,
        ``reads`` and ``stat_mode``, one row per track in catalog order.
    """
    _checkroot()
    return _shared._CATALOG.to_dataframe()


def track_info(platform, genome, name):
    """
    Return the cached metadata of one track.

    Raises
    ------
    TrackNotFoundError
        If the platform, genome or track does not exist.
    """
    _checkroot()
    return _shared._CATALOG.track(platform, genome, name)


def track_resolve(public_id):
    """
    Look up a track in the master index by its public id.

    Returns
    -------
    IndexEntry

    Raises
    ------
    TrackNotFoundError
        If no track has this id.
    DatabaseNotInitializedError
        If the database has no master index.
    """
    _checkindex()
    return _shared._INDEX.resolve(public_id)


def track_reader(platform, genome, name, bin_width):
    """
    Return a reader for a catalogued track at a bin width.

    Raises
    ------
    TrackNotFoundError
        If the track is not in the catalog.
    TrackOpenError
        If the track's metadata cannot be opened.
    """
    _checkroot()
    return _shared._CATALOG.reader(platform, genome, name, bin_width)


def track_reader_from_id(public_id, bin_width):
    """
    Return a reader for the track with ``public_id`` at a bin width.

    Raises
    ------
    TrackNotFoundError
        If no track has this id. No reader is built in that case.
    DatabaseNotInitializedError
        If the database has no master index.
    """
    _checkindex()
    return _shared._INDEX.reader_from_track_id(public_id, bin_width)


def track_bin_counts(location, bin_width, platform=None, genome=None, name=None, public_id=None):
    """
    Return dense per-bin read counts of one track over a location.

    The track is given either by ``public_id`` or by ``platform``,
    ``genome`` and ``name``.

    Parameters
    ----------
    location : Location or location-like
        Object with ``chrom``, ``start`` and ``end`` (1-based inclusive).
    bin_width : int
        Bin width in base pairs.
    platform, genome, name : str, optional
        Track components, used when ``public_id`` is not given.
    public_id : str, optional
        Public track id, resolved through the master index.

    Returns
    -------
    BinCounts

    Raises
    ------
    ValueError
        If the track is not fully specified, or given both ways.
    TrackNotFoundError
        If the track does not exist.
    TrackOpenError
        If the chromosome's data unit is missing or unreadable.

    Examples
    --------
    >>> import pytracks as pt
    >>> _ = pt.db_init("/data/tracks")  # doctest: +SKIP
    >>> loc = pt.Location("chr1", 150, 350)
    >>> counts = pt.track_bin_counts(loc, 100, public_id="trk-001")  # doctest: +SKIP
    >>> counts.start, len(counts.bins)  # doctest: +SKIP
    (101, 3)
    """
    by_name = (platform, genome, name)
    if public_id is not None:
        if any(v is not None for v in by_name):
            raise ValueError("Give either public_id or platform/genome/name, not both")
        reader = track_reader_from_id(public_id, bin_width)
    else:
        if any(v is None for v in by_name):
            raise ValueError("platform, genome and name are required when public_id is not given")
        reader = track_reader(platform, genome, name, bin_width)
    return reader.bin_counts(location)
