"""Snapshot history: version store, models and history files."""

from .models import PatchSummary, RollbackResult, Snapshot
from .persistence import load_history_file, save_history_file
from .store import VersionStore

__all__ = [
    "VersionStore",
    "Snapshot",
    "PatchSummary",
    "RollbackResult",
    "save_history_file",
    "load_history_file",
]
