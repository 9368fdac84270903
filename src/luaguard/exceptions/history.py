"""Snapshot history exceptions."""

from typing import Optional

from .base import LuaguardError


class HistoryError(LuaguardError):
    """Base class for version store errors."""

    pass


class SnapshotNotFoundError(HistoryError):
    """Raised when a path has no history or a version is out of range.

    Callers usually treat this as "nothing to roll back".
    """

    def __init__(self, file_path: str, version: Optional[int] = None, available: int = 0):
        if version is None:
            message = f"No rollback history for {file_path}"
        else:
            message = f"Version {version} not available for {file_path}"
        details = {"file_path": file_path, "available": str(available)}
        if version is not None:
            details["version"] = str(version)
        super().__init__(message, details=details)
        self.file_path = file_path
        self.version = version
        self.available = available


class HistoryFormatError(HistoryError):
    """Raised when exported history cannot be imported."""

    def __init__(self, reason: str, source: Optional[str] = None):
        details = {"reason": reason}
        if source:
            details["source"] = source
        super().__init__("Invalid history data", details=details)
        self.reason = reason
        self.source = source
