"""Discovery index of the platform -> genome -> track hierarchy."""

import logging as _logging
import os
import re
from pathlib import Path
from types import MappingProxyType

import pandas as pd

from ._errors import CatalogBuildError, TrackError, TrackNotFoundError
from ._sqlite import read_metadata
from ._types import AllTracks, Track, TrackGenome, TrackInfo, TrackPlatform
from .reader import TrackReader

_logger = _logging.getLogger(__name__)

_TABLE_COLUMNS = ["platform", "genome", "name", "public_id", "reads", "stat_mode"]


def _list_subdirs(path):
    """Return the visible subdirectory names of ``path``, sorted by name."""
    try:
        with os.scandir(path) as it:
            names = [
                entry.name for entry in it
                if not entry.name.startswith(".") and entry.is_dir()
            ]
    except OSError as exc:
        raise CatalogBuildError(f"Cannot list directory {path}: {exc}", path=str(path)) from exc
    return sorted(names)


class TrackCatalog:
    """
    Immutable snapshot of every track under a database root.

    Build one with :meth:`build`. The snapshot is never modified afterwards,
    so it can be shared between threads without locking.
    """

    def __init__(self, root, index):
        self._root = Path(root)
        self._index = index

    @classmethod
    def build(cls, root):
        """
        Scan ``root`` and cache the metadata of every sample.

        The hierarchy is ``root/platform/genome/sample``. Each level is
        sorted by name; hidden entries and plain files are ignored.

        Parameters
        ----------
        root : str or Path
            Database root.

        Returns
        -------
        TrackCatalog

        Raises
        ------
        CatalogBuildError
            If a directory cannot be listed or a sample's metadata is
            missing or unreadable. ``path`` names the offending location.
        """
        root = Path(root)
        _logger.debug("caching track databases in %s...", root)

        platforms = {}
        n_tracks = 0
        for platform in _list_subdirs(root):
            genomes = {}
            for genome in _list_subdirs(root / platform):
                tracks = []
                for sample in _list_subdirs(root / platform / genome):
                    track = Track(platform, genome, sample)
                    sample_dir = track.path(root)
                    try:
                        meta = read_metadata(sample_dir)
                    except TrackError as exc:
                        raise CatalogBuildError(
                            f"Cannot read metadata of {sample_dir}: {exc}", path=str(sample_dir)
                        ) from exc
                    tracks.append(TrackInfo(track, meta["public_id"], meta["reads"], meta["stat_mode"]))
                genomes[genome] = tuple(tracks)
                n_tracks += len(tracks)
            platforms[platform] = MappingProxyType(genomes)

        _logger.debug("cached %d tracks from %d platforms", n_tracks, len(platforms))
        return cls(root, MappingProxyType(platforms))

    @property
    def root(self):
        return self._root

    def __len__(self):
        return sum(len(tracks) for genomes in self._index.values() for tracks in genomes.values())

    def __repr__(self):
        return f"TrackCatalog({str(self._root)!r}, platforms={len(self._index)}, tracks={len(self)})"

    def platforms(self):
        """Return platform names in lexicographic order."""
        return list(self._index)

    def _platform(self, platform):
        try:
            return self._index[platform]
        except KeyError:
            raise TrackNotFoundError(f"platform {platform} not found") from None

    def genomes(self, platform):
        """Return the genomes of ``platform`` in lexicographic order."""
        return list(self._platform(platform))

    def tracks(self, platform, genome):
        """Return the tracks of ``platform``/``genome`` ordered by name."""
        genomes = self._platform(platform)
        try:
            return list(genomes[genome])
        except KeyError:
            raise TrackNotFoundError(f"genome {genome} not found in platform {platform}") from None

    def track(self, platform, genome, name):
        """Return the :class:`TrackInfo` of one track."""
        for info in self.tracks(platform, genome):
            if info.name == name:
                return info
        raise TrackNotFoundError(f"track {name} not found in {platform}/{genome}")

    def all_tracks(self):
        """Return the full nested platform -> genome -> track snapshot."""
        return AllTracks(tuple(
            TrackPlatform(platform, tuple(
                TrackGenome(genome, tuple(self.tracks(platform, genome)))
                for genome in self.genomes(platform)
            ))
            for platform in self.platforms()
        ))

    def search(self, platform, genome, *patterns, ignore_case=False):
        """
        Return the tracks of ``platform``/``genome`` whose names match all patterns.

        Raises
        ------
        ValueError
            If a regex pattern is invalid.
        """
        tracks = self.tracks(platform, genome)
        flags = re.IGNORECASE if ignore_case else 0
        for pattern in patterns:
            try:
                regex = re.compile(pattern, flags)
            except re.error as e:
                raise ValueError(f"Invalid regex pattern '{pattern}': {e}") from e
            tracks = [t for t in tracks if regex.search(t.name)]
        return tracks

    def reader(self, platform, genome, name, bin_width):
        """Return a :class:`TrackReader` for a catalogued track."""
        info = self.track(platform, genome, name)
        return TrackReader(self._root, info.track, bin_width)

    def to_dataframe(self):
        """Return one row per track, in catalog order."""
        rows = [
            (info.platform, info.genome, info.name, info.public_id, info.reads, info.stat_mode)
            for platform in self._index.values()
            for tracks in platform.values()
            for info in tracks
        ]
        return pd.DataFrame(rows, columns=_TABLE_COLUMNS)
