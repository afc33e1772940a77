"""Tests for db_* session functions and the track_* helpers."""

import pytest
from trackdb import write_metadata

import pytracks as pt
from pytracks import _shared


class TestDbInit:
    """Tests for db_init, db_unload and db_info."""

    def test_init_returns_catalog(self, example_root):
        try:
            catalog = pt.db_init(str(example_root))
            assert isinstance(catalog, pt.TrackCatalog)
            assert pt.db_root() == str(example_root)
        finally:
            pt.db_unload()

    def test_info(self, db):
        info = pt.db_info()
        assert info["path"] == str(db)
        assert info["num_platforms"] == 2
        assert info["num_genomes"] == 3
        assert info["num_tracks"] == 4
        assert info["index"] == str(db / "tracks-index.db")

    def test_unload_clears_state(self, example_root):
        pt.db_init(str(example_root))
        pt.db_unload()
        assert pt._ROOT is None
        assert pt._CATALOG is None
        assert pt._INDEX is None
        with pytest.raises(pt.DatabaseNotInitializedError):
            pt.track_platforms()

    def test_requires_db(self):
        pt.db_unload()
        with pytest.raises(pt.DatabaseNotInitializedError):
            pt.db_info()
        with pytest.raises(RuntimeError):
            pt.track_ls("ChIP-seq", "hg19")

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            pt.db_init(str(tmp_path / "missing"))

    def test_default_root_from_env(self, example_root, monkeypatch):
        monkeypatch.setenv(_shared.ROOT_ENV_VAR, str(example_root))
        try:
            pt.db_init()
            assert pt.db_root() == str(example_root)
        finally:
            pt.db_unload()

    def test_no_path_and_no_env(self, monkeypatch):
        monkeypatch.delenv(_shared.ROOT_ENV_VAR, raising=False)
        with pytest.raises(ValueError):
            pt.db_init()

    def test_failed_init_keeps_previous_db(self, db, tmp_path):
        (tmp_path / "P" / "g1" / "s1").mkdir(parents=True)
        with pytest.raises(pt.CatalogBuildError):
            pt.db_init(str(tmp_path))
        assert pt.db_root() == str(db)

    def test_missing_index_warns(self, tmp_path):
        write_metadata(tmp_path / "P" / "g1" / "s1", "id-1", reads=3)
        try:
            with pytest.warns(RuntimeWarning, match="Track index not available"):
                pt.db_init(str(tmp_path))
            assert pt.track_platforms() == ["P"]
            assert pt.db_info()["index"] is None
            with pytest.raises(pt.DatabaseNotInitializedError):
                pt.track_resolve("id-1")
        finally:
            pt.db_unload()

    def test_index_disabled(self, example_root):
        try:
            pt.db_init(str(example_root), index=False)
            assert pt._INDEX is None
        finally:
            pt.db_unload()

    def test_runtime_state_exports_are_live(self, monkeypatch):
        monkeypatch.setattr(_shared, "_ROOT", "/tmp/live-root")
        assert pt._ROOT == "/tmp/live-root"


class TestTrackFunctions:
    """Tests for track_* functions on the initialized database."""

    def test_platforms_and_genomes(self, db):
        assert pt.track_platforms() == ["ChIP-seq", "RNA-seq"]
        assert pt.track_genomes("ChIP-seq") == ["hg19", "mm10"]
        with pytest.raises(pt.TrackNotFoundError):
            pt.track_genomes("WGS")

    def test_track_ls(self, db):
        assert [t.name for t in pt.track_ls("ChIP-seq", "hg19")] == ["CB4_BCL6", "CB5_BCL6"]
        assert [t.name for t in pt.track_ls("ChIP-seq", "hg19", "4")] == ["CB4_BCL6"]
        assert pt.track_ls("ChIP-seq", "hg19", "bcl6") == []
        assert len(pt.track_ls("ChIP-seq", "hg19", "bcl6", ignore_case=True)) == 2

    def test_track_all(self, db):
        tree = pt.track_all()
        assert isinstance(tree, pt.AllTracks)
        assert [p.name for p in tree] == ["ChIP-seq", "RNA-seq"]
        assert [g.name for g in tree.platforms[0].genomes] == ["hg19", "mm10"]

    def test_track_table(self, db):
        df = pt.track_table()
        assert len(df) == 4
        assert df.loc[df["public_id"] == "rna-001", "platform"].item() == "RNA-seq"

    def test_track_info(self, db):
        assert pt.track_info("RNA-seq", "hg19", "DLBCL_1").reads == 5000

    def test_track_resolve(self, db):
        assert pt.track_resolve("chip-003").track == pt.Track("ChIP-seq", "mm10", "GCB_H3K27ac")

    def test_reader_by_name_and_id_agree(self, db):
        loc = pt.Location("chr1", 1, 2000)
        by_name = pt.track_reader("ChIP-seq", "mm10", "GCB_H3K27ac", 100).bin_counts(loc)
        by_id = pt.track_reader_from_id("chip-003", 100).bin_counts(loc)
        assert by_name.bins.tolist() == by_id.bins.tolist()
        assert by_name.reads == by_id.reads == 2500

    def test_reader_from_unknown_id(self, db):
        with pytest.raises(pt.TrackNotFoundError):
            pt.track_reader_from_id("nope", 100)

    def test_bin_counts_by_id(self, db):
        counts = pt.track_bin_counts(pt.Location("chr1", 150, 350), 100, public_id="rna-001")
        assert counts.start == 101
        assert counts.bins.tolist() == [5, 7, 0]
        assert counts.track.platform == "RNA-seq"

    def test_bin_counts_by_name(self, db):
        counts = pt.track_bin_counts(pt.Location("chr1", 1, 100), 10, "ChIP-seq", "hg19", "CB4_BCL6")
        assert counts.bins.tolist() == [42] * 10

    def test_bin_counts_track_spec_errors(self, db):
        loc = pt.Location("chr1", 1, 100)
        with pytest.raises(ValueError):
            pt.track_bin_counts(loc, 100)
        with pytest.raises(ValueError):
            pt.track_bin_counts(loc, 100, "ChIP-seq", public_id="chip-001")
