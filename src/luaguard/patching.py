"""Line patches and patch summaries.

A :class:`PatchOperation` edits a document by 1-based, inclusive line
ranges. Summaries describe the touched line groups for the snapshot that
precedes the edit, either from the patch itself or from a line diff of
the previous and proposed content.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import List, Literal, Optional

from .exceptions import InvalidPatchError
from .history.models import PatchSummary

PatchKind = Literal["insert", "replace", "delete"]
PATCH_KINDS = ("insert", "replace", "delete")


@dataclass(frozen=True)
class PatchOperation:
    """A line-range edit of one script.

    Attributes:
        script_path: Path of the script to edit
        operation:   insert (before ``line_start``), replace or delete
        line_start:  First line, 1-based
        line_end:    Last line, inclusive (defaults to ``line_start``)
        new_content: Text to insert or replace with
        description: Free-form note shown in history
    """

    script_path: str
    operation: PatchKind
    line_start: int
    line_end: Optional[int] = None
    new_content: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.operation not in PATCH_KINDS:
            raise ValueError(f"operation must be one of {', '.join(PATCH_KINDS)}")
        if self.line_start < 1:
            raise ValueError("line_start must be at least 1")
        if self.line_end is not None and self.line_end < self.line_start:
            raise ValueError("line_end must not be before line_start")

    @property
    def last_line(self) -> int:
        return self.line_end if self.line_end is not None else self.line_start


def apply_patch(content: str, patch: PatchOperation) -> str:
    """Return ``content`` with ``patch`` applied.

    Raises:
        InvalidPatchError: If the line range does not fit the content or
            the operation lacks the content it needs
    """
    lines = content.split("\n")
    count = len(lines)
    start = patch.line_start

    if patch.operation == "insert":
        if patch.new_content is None:
            raise InvalidPatchError("insert requires new_content", start, count)
        if start > count + 1:
            raise InvalidPatchError(f"line {start} is past the end of the file", start, count)
        lines[start - 1:start - 1] = patch.new_content.split("\n")
        return "\n".join(lines)

    end = patch.last_line
    if end > count:
        raise InvalidPatchError(f"line {end} is past the end of the file", start, count)

    if patch.operation == "replace":
        if patch.new_content is None:
            raise InvalidPatchError("replace requires new_content", start, count)
        lines[start - 1:end] = patch.new_content.split("\n")
    else:
        del lines[start - 1:end]
    return "\n".join(lines)


def _line_range(first: int, last: int) -> str:
    if first == last:
        return f"Line {first}"
    return f"Lines {first}-{last}"


def summarize_patch(patch: PatchOperation) -> PatchSummary:
    """Describe the line groups a patch touches."""
    if patch.operation == "insert":
        new_lines = (patch.new_content or "").split("\n")
        note = new_lines[0].strip()
        if len(new_lines) > 1:
            note += f" (+{len(new_lines) - 1} more)"
        return PatchSummary(additions=(f"Line {patch.line_start}: {note}",))
    span = _line_range(patch.line_start, patch.last_line)
    if patch.operation == "delete":
        return PatchSummary(deletions=(span,))
    return PatchSummary(modifications=(span,))


def summarize_diff(previous: str, proposed: str) -> PatchSummary:
    """Describe the line groups that differ between two versions.

    Additions are numbered in the proposed content, deletions and
    modifications in the previous content.
    """
    matcher = difflib.SequenceMatcher(
        a=previous.split("\n"), b=proposed.split("\n"), autojunk=False
    )
    additions: List[str] = []
    deletions: List[str] = []
    modifications: List[str] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "insert":
            additions.append(_line_range(j1 + 1, j2))
        elif tag == "delete":
            deletions.append(_line_range(i1 + 1, i2))
        elif tag == "replace":
            modifications.append(_line_range(i1 + 1, i2))
    return PatchSummary(
        additions=tuple(additions),
        deletions=tuple(deletions),
        modifications=tuple(modifications),
    )
