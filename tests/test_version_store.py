"""Tests for the snapshot history store and history files."""

import json

import pytest

from luaguard.exceptions import HistoryFormatError, SnapshotNotFoundError
from luaguard.history import (
    PatchSummary,
    Snapshot,
    VersionStore,
    load_history_file,
    save_history_file,
)


class TestSaveAndRollback:
    def test_versions_indexed_oldest_first(self, store):
        store.save_snapshot("a.lua", "v1")
        store.save_snapshot("a.lua", "v2")
        assert store.rollback("a.lua", 0).content == "v1"
        assert store.rollback("a.lua").content == "v2"

    def test_rollback_reports_version(self, store):
        store.save_snapshot("a.lua", "v1")
        store.save_snapshot("a.lua", "v2")
        result = store.rollback("a.lua")
        assert result.success
        assert result.version == 1

    def test_rollback_does_not_consume_history(self, store):
        store.save_snapshot("a.lua", "v1")
        store.rollback("a.lua")
        store.rollback("a.lua")
        assert len(store.get_history("a.lua")["a.lua"]) == 1

    def test_unknown_path(self, store):
        with pytest.raises(SnapshotNotFoundError):
            store.rollback("missing.lua")

    def test_version_out_of_range(self, store):
        store.save_snapshot("a.lua", "v1")
        with pytest.raises(SnapshotNotFoundError):
            store.rollback("a.lua", 1)
        with pytest.raises(SnapshotNotFoundError):
            store.rollback("a.lua", -1)

    def test_paths_are_independent(self, store):
        store.save_snapshot("a.lua", "a1")
        store.save_snapshot("b.lua", "b1")
        assert store.rollback("a.lua").content == "a1"
        assert store.rollback("b.lua").content == "b1"

    def test_snapshot_metadata(self):
        store = VersionStore(chars_per_token=4)
        summary = PatchSummary(modifications=("Line 3",))
        store.save_snapshot("a.lua", "x" * 9, summary)
        snapshot = store.get_history("a.lua")["a.lua"][0]
        assert snapshot.patch_summary == summary
        assert snapshot.estimated_cost == 3
        assert snapshot.timestamp


class TestHistoryQueries:
    def test_unknown_path_maps_to_empty(self, store):
        assert store.get_history("nope.lua") == {"nope.lua": []}

    def test_all_paths(self, store):
        store.save_snapshot("a.lua", "1")
        store.save_snapshot("b.lua", "2")
        assert set(store.get_history()) == {"a.lua", "b.lua"}

    def test_returned_lists_are_copies(self, store):
        store.save_snapshot("a.lua", "1")
        store.get_history("a.lua")["a.lua"].clear()
        assert len(store) == 1

    def test_clear_one_path(self, store):
        store.save_snapshot("a.lua", "1")
        store.save_snapshot("b.lua", "2")
        store.clear_history("a.lua")
        assert store.get_history() == {"b.lua": store.get_history("b.lua")["b.lua"]}

    def test_clear_all(self, store):
        store.save_snapshot("a.lua", "1")
        store.clear_history()
        assert len(store) == 0

    def test_total_estimated_cost(self):
        store = VersionStore(chars_per_token=2)
        store.save_snapshot("a.lua", "abcd")
        store.save_snapshot("b.lua", "abc")
        assert store.total_estimated_cost() == 2 + 2


class TestBoundedHistory:
    def test_oldest_dropped(self):
        store = VersionStore(max_entries=2)
        for content in ("v1", "v2", "v3"):
            store.save_snapshot("a.lua", content)
        assert store.rollback("a.lua", 0).content == "v2"
        assert store.rollback("a.lua").content == "v3"

    def test_invalid_bound(self):
        with pytest.raises(ValueError):
            VersionStore(max_entries=0)


class TestSerialisation:
    def test_export_import(self, store):
        store.save_snapshot("a.lua", "v1", PatchSummary(additions=("Line 1",)))
        store.save_snapshot("a.lua", "v2")
        other = VersionStore()
        assert other.import_history(store.export_history()) == 2
        assert other.get_history() == store.get_history()

    def test_import_applies_bound(self, store):
        for content in ("v1", "v2", "v3"):
            store.save_snapshot("a.lua", content)
        bounded = VersionStore(max_entries=1)
        bounded.import_history(store.export_history())
        assert bounded.rollback("a.lua", 0).content == "v3"

    def test_import_rejects_invalid_json(self, store):
        with pytest.raises(HistoryFormatError, match="not valid JSON"):
            store.import_history("{nope")

    def test_import_rejects_wrong_shape(self, store):
        with pytest.raises(HistoryFormatError):
            store.import_history(json.dumps([1, 2]))
        with pytest.raises(HistoryFormatError):
            store.import_history(json.dumps({"a.lua": [{"timestamp": "x"}]}))

    def test_snapshot_dict_round_trip(self):
        snapshot = Snapshot("a.lua", "x", "2024-01-01T00:00:00+00:00", PatchSummary(deletions=("Line 2",)), 1)
        assert Snapshot.from_dict(snapshot.to_dict()) == snapshot


class TestHistoryFile:
    def test_save_and_load(self, store, tmp_path):
        store.save_snapshot("a.lua", "v1")
        path = tmp_path / "nested" / "history.json"
        save_history_file(store, path)
        assert path.exists()

        loaded = VersionStore()
        assert load_history_file(loaded, path) == 1
        assert loaded.rollback("a.lua").content == "v1"

    def test_missing_file(self, tmp_path):
        assert load_history_file(VersionStore(), tmp_path / "none.json") == 0

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(HistoryFormatError):
            load_history_file(VersionStore(), path)
