"""Snapshot records: immutable copies of content taken before a write."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Tuple


@dataclass(frozen=True)
class PatchSummary:
    """Line groups touched by the mutation a snapshot precedes.

    Each entry is a short human-readable description such as
    ``"Lines 3-5"`` or ``"Line 7: print(x)"``.
    """

    additions: Tuple[str, ...] = ()
    deletions: Tuple[str, ...] = ()
    modifications: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.additions or self.deletions or self.modifications)

    def to_dict(self) -> dict:
        return {
            "additions": list(self.additions),
            "deletions": list(self.deletions),
            "modifications": list(self.modifications),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PatchSummary":
        return cls(
            additions=tuple(data.get("additions", ())),
            deletions=tuple(data.get("deletions", ())),
            modifications=tuple(data.get("modifications", ())),
        )


@dataclass(frozen=True)
class Snapshot:
    """Content of a file immediately before a mutation attempt.

    Never mutated. Superseded by newer snapshots of the same path or
    removed by an explicit clear.
    """

    file_path: str
    content: str
    timestamp: str = ""  # ISO-8601
    patch_summary: PatchSummary = field(default_factory=PatchSummary)
    estimated_cost: int = 0

    @staticmethod
    def now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "content": self.content,
            "timestamp": self.timestamp,
            "patch_summary": self.patch_summary.to_dict(),
            "estimated_cost": self.estimated_cost,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Snapshot":
        return cls(
            file_path=data["file_path"],
            content=data["content"],
            timestamp=data.get("timestamp", ""),
            patch_summary=PatchSummary.from_dict(data.get("patch_summary") or {}),
            estimated_cost=int(data.get("estimated_cost", 0)),
        )


@dataclass(frozen=True)
class RollbackResult:
    """Content retrieved from history for a restore."""

    success: bool
    content: str
    version: int
