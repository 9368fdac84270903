"""File access exceptions raised by the local file collaborator."""

from pathlib import Path

from .base import LuaguardError


class FileAccessError(LuaguardError):
    """Raised when a file cannot be read or written."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason
