"""History files: keep a VersionStore across process restarts."""

from __future__ import annotations

from pathlib import Path

from ..exceptions import FileAccessError
from ..logging_config import get_logger
from .store import VersionStore

logger = get_logger(__name__)


def save_history_file(store: VersionStore, path: Path) -> None:
    """Write the store's history to ``path`` as JSON, creating parent dirs.

    Raises:
        FileAccessError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(store.export_history(), encoding="utf-8")
    except OSError as e:
        raise FileAccessError(path, f"Cannot write history: {e}")
    logger.info(f"Saved history with {len(store)} snapshot(s) to {path}")


def load_history_file(store: VersionStore, path: Path) -> int:
    """Load history from ``path`` into ``store``.

    Returns:
        Number of snapshots loaded; 0 if the file does not exist.

    Raises:
        FileAccessError: If the file exists but cannot be read
        HistoryFormatError: If the file is not a history export
    """
    path = Path(path)
    if not path.exists():
        logger.info(f"No history file at {path}")
        return 0
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError(path, f"Cannot read history: {e}")
    count = store.import_history(text, source=str(path))
    logger.info(f"Loaded {count} snapshot(s) from {path}")
    return count
