"""Bin-range reading of run-length encoded track data."""

import logging as _logging
from pathlib import Path

import numpy as np

from ._errors import SegmentOrderError
from ._name_validation import validate_path_component
from ._shared import CONFIG
from ._sqlite import query_segments, read_metadata
from ._types import BIN_DTYPE, BinCounts, RunLengthSegment, _location_fields

_logger = _logging.getLogger(__name__)


def _validate_bin_width(bin_width):
    if isinstance(bin_width, bool) or not isinstance(bin_width, (int, np.integer)):
        raise ValueError(f"bin_width must be a positive integer, got {bin_width!r}")
    if bin_width <= 0:
        raise ValueError(f"bin_width must be a positive integer, got {bin_width}")
    return int(bin_width)


def bin_range(location, bin_width):
    """
    Return the zero-based ``(start_bin, end_bin)`` covering a location.

    Both bins are inclusive. ``location`` is 1-based and inclusive, so
    ``chr1:150-350`` at a bin width of 100 covers bins 1 to 3.

    Raises
    ------
    ValueError
        If the location ends before it starts.
    """
    bin_width = _validate_bin_width(bin_width)
    _, start, end = _location_fields(location)
    if end < start:
        raise ValueError(f"Location end {end} precedes start {start}")
    return (start - 1) // bin_width, (end - 1) // bin_width


def decode_segments(segments, start_bin, n_bins):
    """
    Expand run-length segments into a dense array of per-bin counts.

    Parameters
    ----------
    segments : array-like
        ``(n, 3)`` rows of ``start, end, count`` with half-open bin ranges,
        ascending and non-overlapping, each intersecting the window.
    start_bin : int
        Bin index of the first element of the result.
    n_bins : int
        Length of the result.

    Returns
    -------
    numpy.ndarray
        Counts for bins ``start_bin .. start_bin + n_bins - 1``. Bins with no
        segment are zero. Segments reaching past either edge of the window
        are clipped to it.

    Raises
    ------
    SegmentOrderError
        If a segment is empty, has a negative count, lies outside the window,
        or overlaps or precedes the segment before it.
    """
    result = np.zeros(n_bins, dtype=BIN_DTYPE)
    window_end = start_bin + n_bins
    prev_end = None

    for seg_start, seg_end, count in np.asarray(segments, dtype=np.int64).reshape(-1, 3):
        if seg_end <= seg_start:
            raise SegmentOrderError(f"Empty segment [{seg_start}, {seg_end})")
        if count < 0:
            raise SegmentOrderError(f"Negative count {count} in segment [{seg_start}, {seg_end})")
        if prev_end is not None and seg_start < prev_end:
            raise SegmentOrderError(
                f"Segment [{seg_start}, {seg_end}) overlaps or precedes a segment ending at {prev_end}"
            )
        if seg_end <= start_bin or seg_start >= window_end:
            raise SegmentOrderError(
                f"Segment [{seg_start}, {seg_end}) lies outside bins [{start_bin}, {window_end})"
            )
        prev_end = seg_end

        lo = max(int(seg_start), start_bin)
        hi = min(int(seg_end), window_end)
        result[lo - start_bin:hi - start_bin] = count

    return result


class TrackReader:
    """
    Reader bound to one track at one bin width.

    The sample's metadata is read once at construction; every
    :meth:`bin_counts` call opens and closes its own connection to the
    per-chromosome data unit, so a reader can be shared between threads.

    Parameters
    ----------
    root : str or Path
        Database root.
    track : Track
        Track identity.
    bin_width : int
        Width of a bin in base pairs.
    dir : str or Path, optional
        Sample directory. Relative paths are resolved against ``root``.
        Defaults to ``root/platform/genome/name``.

    Raises
    ------
    TrackOpenError
        If the sample's metadata unit is missing or unreadable.
    TrackSchemaError
        If the metadata record is malformed.
    ValueError
        If ``bin_width`` is not a positive integer or a track component is
        not a plain directory name.
    """

    def __init__(self, root, track, bin_width, dir=None):
        for value, kind in ((track.platform, "platform"), (track.genome, "genome"),
                            (track.name, "track name")):
            validate_path_component(value, kind)

        self.root = Path(root)
        self.track = track
        self.bin_width = _validate_bin_width(bin_width)
        if dir is None:
            self.dir = track.path(self.root)
        else:
            self.dir = Path(dir) if Path(dir).is_absolute() else self.root / dir

        meta = read_metadata(self.dir)
        self.public_id = meta["public_id"]
        self.reads = meta["reads"]
        self.stat_mode = meta["stat_mode"]

    def __repr__(self):
        t = self.track
        return f"TrackReader({t.platform}/{t.genome}/{t.name}, bin_width={self.bin_width})"

    @property
    def genome(self):
        return self.track.genome

    def chrom_path(self, location):
        """Return the data unit holding ``location``'s chromosome at this bin width."""
        chrom, _, _ = _location_fields(location)
        chrom = chrom.lower()
        validate_path_component(chrom, "chromosome")
        filename = f"{chrom}_bw{self.bin_width}_{self.track.genome}{CONFIG['db_suffix']}"
        return self.dir / filename

    def segments(self, location):
        """Return the stored segments intersecting ``location``, ordered by start."""
        start_bin, end_bin = bin_range(location, self.bin_width)
        rows = query_segments(self.chrom_path(location), start_bin, end_bin)
        return [RunLengthSegment(*map(int, row)) for row in rows]

    def bin_counts(self, location):
        """
        Return dense read counts for every bin overlapping ``location``.

        Parameters
        ----------
        location : Location or location-like
            Object with ``chrom``, ``start`` and ``end`` (1-based inclusive).

        Returns
        -------
        BinCounts

        Raises
        ------
        TrackOpenError
            If the chromosome's data unit is missing or unreadable.
        TrackSchemaError
            If stored rows are malformed or out of order.
        """
        start_bin, end_bin = bin_range(location, self.bin_width)
        n_bins = end_bin - start_bin + 1
        path = self.chrom_path(location)

        segments = query_segments(path, start_bin, end_bin)
        _logger.debug("%s: %d segments for bins %d-%d", path.name, len(segments), start_bin, end_bin)
        bins = decode_segments(segments, start_bin, n_bins)

        return BinCounts(
            track=self.track,
            location=location,
            bins=bins,
            start=start_bin * self.bin_width + 1,
            bin_width=self.bin_width,
            reads=self.reads,
        )

