"""Record types shared by the catalog, index and reader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

import numpy as np
import pandas as pd

BIN_DTYPE = np.uint64


@dataclass(frozen=True)
class Track:
    """Identity of a track: platform, genome assembly and sample name."""

    platform: str
    genome: str
    name: str

    def path(self, root) -> Path:
        """Return the sample directory ``root/platform/genome/name``."""
        return Path(root) / self.platform / self.genome / self.name


@dataclass(frozen=True)
class TrackInfo:
    """Catalog entry for one track."""

    track: Track
    public_id: str
    reads: int
    stat_mode: str

    @property
    def platform(self) -> str:
        return self.track.platform

    @property
    def genome(self) -> str:
        return self.track.genome

    @property
    def name(self) -> str:
        return self.track.name


@dataclass(frozen=True)
class IndexEntry:
    """One row of the master track index."""

    public_id: str
    platform: str
    genome: str
    name: str
    reads: int
    stat_mode: str
    dir: str

    @property
    def track(self) -> Track:
        return Track(self.platform, self.genome, self.name)

    @property
    def info(self) -> TrackInfo:
        return TrackInfo(self.track, self.public_id, self.reads, self.stat_mode)


class RunLengthSegment(NamedTuple):
    """A run of bins ``[start, end)`` sharing one count."""

    start: int
    end: int
    count: int

    @property
    def width(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Location:
    """A 1-based, inclusive genomic interval."""

    chrom: str
    start: int
    end: int

    def __str__(self):
        return f"{self.chrom}:{self.start}-{self.end}"


def _location_fields(location):
    """Return ``(chrom, start, end)`` from any location-like object."""
    chrom = getattr(location, "chrom", None)
    if chrom is None:
        chrom = getattr(location, "chr", None)
    if chrom is None:
        raise TypeError(
            f"location must expose 'chrom' (or 'chr'), 'start' and 'end'; got {type(location).__name__}"
        )
    return str(chrom), int(location.start), int(location.end)


@dataclass(frozen=True, eq=False)
class BinCounts:
    """
    Dense per-bin read counts for one genomic interval.

    ``start`` is the 1-based coordinate of the first bin, which may precede
    ``location.start`` when the location does not begin on a bin boundary.
    ``bins`` is a read-only view; the array passed in keeps its flags.
    """

    track: Track
    location: object
    bins: np.ndarray
    start: int
    bin_width: int
    reads: int = 0

    def __post_init__(self):
        bins = np.asarray(self.bins).view()
        bins.flags.writeable = False
        object.__setattr__(self, "bins", bins)

    def __len__(self):
        return len(self.bins)

    @property
    def end(self) -> int:
        """1-based inclusive coordinate of the end of the last bin."""
        return self.start + len(self.bins) * self.bin_width - 1

    def to_dataframe(self) -> pd.DataFrame:
        """Return one row per bin with ``chrom``, ``start``, ``end``, ``reads``."""
        chrom, _, _ = _location_fields(self.location)
        starts = self.start + np.arange(len(self.bins), dtype=np.int64) * self.bin_width
        return pd.DataFrame({
            "chrom": chrom,
            "start": starts,
            "end": starts + self.bin_width - 1,
            "reads": self.bins,
        })


@dataclass(frozen=True)
class TrackGenome:
    name: str
    tracks: tuple[TrackInfo, ...]


@dataclass(frozen=True)
class TrackPlatform:
    name: str
    genomes: tuple[TrackGenome, ...]


@dataclass(frozen=True)
class AllTracks:
    """Nested platform -> genome -> track snapshot of a catalog."""

    platforms: tuple[TrackPlatform, ...]

    def __iter__(self):
        return iter(self.platforms)

    def __len__(self):
        return len(self.platforms)
