"""Exception hierarchy for luaguard."""

from .base import LuaguardError
from .config import ConfigurationError, InvalidConfigError, SecurityError
from .files import FileAccessError
from .history import HistoryError, HistoryFormatError, SnapshotNotFoundError
from .mutation import (
    InvalidPatchError,
    MutationError,
    MutationInProgressError,
    NoPendingMutationError,
)

__all__ = [
    "LuaguardError",
    "ConfigurationError",
    "InvalidConfigError",
    "SecurityError",
    "FileAccessError",
    "HistoryError",
    "HistoryFormatError",
    "SnapshotNotFoundError",
    "MutationError",
    "MutationInProgressError",
    "NoPendingMutationError",
    "InvalidPatchError",
]
