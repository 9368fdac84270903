"""In-memory, append-oriented snapshot history keyed by file path."""

from __future__ import annotations

import json
import logging
import math
import threading
from typing import Dict, List, Optional

from ..exceptions import HistoryFormatError, SnapshotNotFoundError
from .models import PatchSummary, RollbackResult, Snapshot

logger = logging.getLogger(__name__)


class VersionStore:
    """Per-path rollback history.

    Index 0 of a path's history is its oldest snapshot and the last index
    the most recent pre-write state. History only grows, except through
    :meth:`clear_history` or, when ``max_entries`` is set, by dropping the
    oldest entry once the bound is exceeded (indexes then shift down).

    All public methods take the store lock, so two mutation attempts can
    never interleave their snapshots.

    Args:
        max_entries: Snapshots kept per path (None = unbounded)
        chars_per_token: Divisor for a snapshot's estimated cost
    """

    def __init__(self, max_entries: Optional[int] = None, chars_per_token: int = 4) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if chars_per_token < 1:
            raise ValueError("chars_per_token must be at least 1")
        self.max_entries = max_entries
        self.chars_per_token = chars_per_token
        self._history: Dict[str, List[Snapshot]] = {}
        self._lock = threading.RLock()

    def save_snapshot(
        self, file_path: str, content: str, patch_summary: Optional[PatchSummary] = None
    ) -> None:
        """Append a snapshot of ``content`` to the history of ``file_path``."""
        snapshot = Snapshot(
            file_path=file_path,
            content=content,
            timestamp=Snapshot.now_iso(),
            patch_summary=patch_summary or PatchSummary(),
            estimated_cost=math.ceil(len(content) / self.chars_per_token),
        )
        with self._lock:
            history = self._history.setdefault(file_path, [])
            history.append(snapshot)
            if self.max_entries is not None and len(history) > self.max_entries:
                del history[: len(history) - self.max_entries]
            count = len(history)
        logger.debug(f"Snapshot saved for {file_path} (version {count - 1}, {len(content)} chars)")

    def rollback(self, file_path: str, version: Optional[int] = None) -> RollbackResult:
        """Return the content of a stored snapshot.

        Args:
            file_path: Path whose history to read
            version: Exact index; the most recent snapshot when omitted

        Raises:
            SnapshotNotFoundError: Unknown path or version out of range
        """
        with self._lock:
            history = self._history.get(file_path)
            if not history:
                raise SnapshotNotFoundError(file_path, version)
            if version is None:
                index = len(history) - 1
            elif 0 <= version < len(history):
                index = version
            else:
                raise SnapshotNotFoundError(file_path, version, available=len(history))
            snapshot = history[index]

        return RollbackResult(success=True, content=snapshot.content, version=index)

    def get_history(self, file_path: Optional[str] = None) -> Dict[str, List[Snapshot]]:
        """Return ``{path: [snapshot, ...]}`` for one path or for all paths.

        The lists are copies; an unknown path maps to an empty list.
        """
        with self._lock:
            if file_path is not None:
                return {file_path: list(self._history.get(file_path, []))}
            return {path: list(entries) for path, entries in self._history.items()}

    def clear_history(self, file_path: Optional[str] = None) -> None:
        """Purge the snapshots of ``file_path``, or of every path."""
        with self._lock:
            if file_path is not None:
                self._history.pop(file_path, None)
            else:
                self._history.clear()
        logger.debug(f"History cleared for {file_path or 'all paths'}")

    def total_estimated_cost(self) -> int:
        """Sum of the estimated cost of every stored snapshot."""
        with self._lock:
            return sum(s.estimated_cost for entries in self._history.values() for s in entries)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(entries) for entries in self._history.values())

    # -- serialisation --

    def export_history(self) -> str:
        """Serialise the whole history to a JSON document."""
        with self._lock:
            data = {
                path: [s.to_dict() for s in entries] for path, entries in self._history.items()
            }
        return json.dumps(data, indent=2)

    def import_history(self, text: str, source: Optional[str] = None) -> int:
        """Replace the history with the one in a JSON document.

        Returns:
            Number of snapshots imported

        Raises:
            HistoryFormatError: If the document is not a valid export
        """
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise HistoryFormatError(f"not valid JSON: {e}", source)
        if not isinstance(raw, dict):
            raise HistoryFormatError("top level must be an object", source)

        imported: Dict[str, List[Snapshot]] = {}
        try:
            for path, entries in raw.items():
                snapshots = [Snapshot.from_dict(entry) for entry in entries]
                if self.max_entries is not None:
                    snapshots = snapshots[-self.max_entries:]
                imported[path] = snapshots
        except (KeyError, TypeError, ValueError) as e:
            raise HistoryFormatError(f"malformed snapshot entry: {e}", source)

        with self._lock:
            self._history = imported
        count = sum(len(entries) for entries in imported.values())
        logger.debug(f"Imported {count} snapshot(s) for {len(imported)} path(s)")
        return count
