"""Tests for the luaguard exception hierarchy."""

import pytest

from luaguard.exceptions import (
    ConfigurationError,
    FileAccessError,
    HistoryError,
    HistoryFormatError,
    InvalidConfigError,
    InvalidPatchError,
    LuaguardError,
    MutationError,
    MutationInProgressError,
    NoPendingMutationError,
    SecurityError,
    SnapshotNotFoundError,
)


class TestHierarchy:
    """Every error is catchable as LuaguardError."""

    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("bad"),
            InvalidConfigError("chars_per_token", "x", "not an int"),
            SecurityError("escape"),
            FileAccessError("a.lua", "gone"),
            SnapshotNotFoundError("a.lua"),
            HistoryFormatError("broken"),
            MutationInProgressError("a.lua", "validating"),
            NoPendingMutationError("a.lua"),
            InvalidPatchError("past end", 9, 3),
        ],
    )
    def test_base_class(self, error):
        assert isinstance(error, LuaguardError)

    def test_families(self):
        assert issubclass(SecurityError, ConfigurationError)
        assert issubclass(SnapshotNotFoundError, HistoryError)
        assert issubclass(InvalidPatchError, MutationError)


class TestMessages:
    def test_details_appended(self):
        error = LuaguardError("failed", details={"path": "a.lua"})
        assert str(error) == "failed (path=a.lua)"

    def test_no_details(self):
        assert str(LuaguardError("failed")) == "failed"

    def test_snapshot_not_found_without_version(self):
        error = SnapshotNotFoundError("a.lua")
        assert error.message == "No rollback history for a.lua"
        assert error.version is None

    def test_snapshot_not_found_with_version(self):
        error = SnapshotNotFoundError("a.lua", version=4, available=2)
        assert error.message == "Version 4 not available for a.lua"
        assert "available=2" in str(error)

    def test_in_progress_carries_state(self):
        error = MutationInProgressError("a.lua", "snapshotting")
        assert error.state == "snapshotting"
        assert "a.lua" in str(error)
