"""Tests for TrackIndex lookups by public id."""

import sqlite3
import threading

import pytest
from trackdb import write_index, write_metadata, write_segments

import pytracks as pt


@pytest.fixture
def index(example_root):
    with pt.TrackIndex(example_root) as idx:
        yield idx


class TestTrackIndexResolve:
    """Tests for TrackIndex.resolve."""

    def test_resolve(self, index):
        entry = index.resolve("chip-002")
        assert entry == pt.IndexEntry(
            "chip-002", "ChIP-seq", "hg19", "CB5_BCL6", 1200, "mean", "ChIP-seq/hg19/CB5_BCL6"
        )
        assert entry.track == pt.Track("ChIP-seq", "hg19", "CB5_BCL6")
        assert entry.info.public_id == "chip-002"

    def test_unknown_id(self, index):
        with pytest.raises(pt.TrackNotFoundError):
            index.resolve("chip-999")

    def test_missing_index_file(self, tmp_path):
        with pytest.raises(pt.TrackOpenError):
            pt.TrackIndex(tmp_path)

    def test_wrong_schema(self, tmp_path):
        conn = sqlite3.connect(tmp_path / "tracks-index.db")
        conn.execute("CREATE TABLE tracks (public_id TEXT)")
        conn.commit()
        conn.close()

        with pt.TrackIndex(tmp_path) as idx, pytest.raises(pt.TrackSchemaError):
            idx.resolve("x")

    def test_duplicate_id(self, tmp_path):
        row = ("dup", "P", "g1", "s1", 1, "mean", "P/g1/s1")
        write_index(tmp_path, [row, row])
        with pt.TrackIndex(tmp_path) as idx, pytest.raises(pt.TrackSchemaError):
            idx.resolve("dup")

    def test_null_stat_mode_matches_catalog(self, tmp_path):
        """A NULL stat_mode reads as "" both by id and through the catalog."""
        write_metadata(tmp_path / "P" / "g1" / "s1", "id-1", reads=3, stat_mode=None)
        write_index(tmp_path, [("id-1", "P", "g1", "s1", 3, None, "P/g1/s1")])

        info = pt.TrackCatalog.build(tmp_path).track("P", "g1", "s1")
        with pt.TrackIndex(tmp_path) as idx:
            entry = idx.resolve("id-1")
        assert entry.stat_mode == info.stat_mode == ""
        assert entry.info == info

    @pytest.mark.parametrize("column", [1, 4, 6])
    def test_null_required_column(self, tmp_path, column):
        row = ["id-1", "P", "g1", "s1", 3, "mean", "P/g1/s1"]
        row[column] = None
        write_index(tmp_path, [tuple(row)])
        with pt.TrackIndex(tmp_path) as idx, pytest.raises(pt.TrackSchemaError):
            idx.resolve("id-1")

    def test_empty_dir_is_malformed(self, tmp_path):
        """An empty storage dir must not resolve to the database root."""
        write_metadata(tmp_path, "root-id", reads=1)
        write_index(tmp_path, [("id-1", "P", "g1", "s1", 3, "mean", "")])
        with pt.TrackIndex(tmp_path) as idx:
            with pytest.raises(pt.TrackSchemaError):
                idx.resolve("id-1")
            with pytest.raises(pt.TrackSchemaError):
                idx.reader_from_track_id("id-1", 100)

    def test_closed_index(self, example_root):
        idx = pt.TrackIndex(example_root)
        idx.close()
        idx.close()
        with pytest.raises(ValueError):
            idx.resolve("chip-001")

    def test_concurrent_lookups(self, index):
        ids = ["chip-001", "chip-002", "chip-003", "rna-001"]
        results = {}
        errors = []

        def worker(n):
            try:
                for _ in range(50):
                    public_id = ids[n % len(ids)]
                    results.setdefault(n, set()).add(index.resolve(public_id).public_id)
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert all(results[n] == {ids[n % len(ids)]} for n in range(8))


class TestReaderFromTrackId:
    """Tests for TrackIndex.reader_from_track_id."""

    def test_reader(self, index):
        reader = index.reader_from_track_id("chip-001", 100)
        assert reader.track == pt.Track("ChIP-seq", "hg19", "CB4_BCL6")
        assert reader.reads == 1000
        counts = reader.bin_counts(pt.Location("chr1", 150, 350))
        assert counts.start == 101
        assert counts.bins.tolist() == [5, 7, 0]

    def test_unknown_id_builds_no_reader(self, index, monkeypatch):
        built = []
        real_init = pt.TrackReader.__init__

        def spy(self, *args, **kwargs):
            built.append(args)
            real_init(self, *args, **kwargs)

        monkeypatch.setattr(pt.TrackReader, "__init__", spy)
        with pytest.raises(pt.TrackNotFoundError):
            index.reader_from_track_id("nope", 100)
        assert built == []

    def test_storage_dir_taken_from_index(self, tmp_path):
        """The index may point a track at a directory outside the hierarchy."""
        storage = write_metadata(tmp_path / "store" / "sample-x", "x-1", reads=77)
        write_segments(storage / "chrx_bw10_g1.db", [(1, 3, 4)])
        write_index(tmp_path, [("x-1", "P", "g1", "sample-x", 77, "sum", str(storage))])

        with pt.TrackIndex(tmp_path) as idx:
            reader = idx.reader_from_track_id("x-1", 10)
        assert reader.dir == storage
        assert reader.bin_counts(pt.Location("chrX", 1, 40)).bins.tolist() == [0, 4, 4, 0]
