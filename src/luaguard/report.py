"""Diagnostic reports: structural findings and anti-pattern hits, grouped by severity.

Entries are ordered critical, error, warning, info. Within a severity,
structural findings come before anti-pattern hits; otherwise the order
in which files were checked (and rules evaluated) is kept.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .antipatterns import DetectionHit
from .validation import ErrorKind, ValidationResult, suggest_missing_closers

SEVERITY_ORDER = ("critical", "error", "warning", "info")

SOURCE_STRUCTURAL = "structural"
SOURCE_ANTIPATTERN = "antipattern"
_SOURCE_ORDER = (SOURCE_STRUCTURAL, SOURCE_ANTIPATTERN)

_SYNTAX_FIX = "Terminate the string or comment before the end of the file"


def code_snippet(content: str, line: Optional[int], context: int = 3) -> Optional[str]:
    """Lines around ``line`` with line numbers; the reported line is marked with '>'."""
    if line is None or line < 1:
        return None
    lines = content.split("\n")
    if line > len(lines):
        return None

    first = max(1, line - context)
    last = min(len(lines), line + context)
    width = len(str(last))
    out = []
    for number in range(first, last + 1):
        marker = ">" if number == line else " "
        out.append(f"{marker} {number:>{width}} | {lines[number - 1]}")
    return "\n".join(out)


@dataclass(frozen=True)
class ReportEntry:
    """One finding in a diagnostic report."""

    file: str
    line: Optional[int]
    severity: str
    source: str
    title: str  # rule name, or the error kind for structural findings
    description: str
    fix: Optional[str] = None
    example: Optional[str] = None
    snippet: Optional[str] = None

    @property
    def sort_key(self) -> tuple:
        return (SEVERITY_ORDER.index(self.severity), _SOURCE_ORDER.index(self.source))

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "line": self.line,
            "severity": self.severity,
            "source": self.source,
            "title": self.title,
            "description": self.description,
            "fix": self.fix,
            "example": self.example,
            "snippet": self.snippet,
        }


@dataclass
class DiagnosticReport:
    """Severity-ordered findings for one or more files.

    ``suggested_closers`` maps a file to the closers that, appended in
    order, would balance it. It is only filled for files whose sole
    problem is running out of input.
    """

    entries: List[ReportEntry] = field(default_factory=list)
    files_checked: int = 0
    suggested_closers: Dict[str, List[str]] = field(default_factory=dict)

    def by_severity(self) -> Dict[str, List[ReportEntry]]:
        groups: Dict[str, List[ReportEntry]] = {s: [] for s in SEVERITY_ORDER}
        for entry in self.entries:
            groups[entry.severity].append(entry)
        return groups

    def counts(self) -> Dict[str, int]:
        return {severity: len(items) for severity, items in self.by_severity().items()}

    @property
    def has_structural_errors(self) -> bool:
        return any(e.source == SOURCE_STRUCTURAL for e in self.entries)

    @property
    def is_clean(self) -> bool:
        return not self.entries

    def to_dict(self) -> dict:
        return {
            "files_checked": self.files_checked,
            "counts": self.counts(),
            "entries": [e.to_dict() for e in self.entries],
            "suggested_closers": self.suggested_closers,
        }


class ReportGenerator:
    """Builds diagnostic reports from validation results and scan hits.

    Args:
        context_lines: Lines of context in each entry's snippet (0 disables snippets)
    """

    def __init__(self, context_lines: int = 3) -> None:
        self.context_lines = context_lines

    def _snippet(self, content: Optional[str], line: Optional[int]) -> Optional[str]:
        if content is None or self.context_lines <= 0:
            return None
        return code_snippet(content, line, self.context_lines)

    def entries_for(
        self,
        file: str,
        validation: Optional[ValidationResult],
        hits: Sequence[DetectionHit],
        content: Optional[str] = None,
    ) -> List[ReportEntry]:
        entries: List[ReportEntry] = []
        if validation is not None:
            for error in validation.errors:
                entries.append(
                    ReportEntry(
                        file=file,
                        line=error.line,
                        severity=error.severity.value,
                        source=SOURCE_STRUCTURAL,
                        title=error.kind.value,
                        description=error.message,
                        fix=_SYNTAX_FIX if error.kind is ErrorKind.SYNTAX else None,
                        snippet=self._snippet(content, error.line),
                    )
                )
        for hit in hits:
            entries.append(
                ReportEntry(
                    file=file,
                    line=hit.line,
                    severity=hit.rule.severity.value,
                    source=SOURCE_ANTIPATTERN,
                    title=hit.rule.name,
                    description=hit.rule.description,
                    fix=hit.rule.fix,
                    example=hit.rule.example,
                    snippet=self._snippet(content, hit.line),
                )
            )
        return entries

    def generate(
        self,
        file: str,
        validation: Optional[ValidationResult],
        hits: Sequence[DetectionHit],
        content: Optional[str] = None,
    ) -> DiagnosticReport:
        """Report for a single file."""
        report = DiagnosticReport(
            entries=sorted(self.entries_for(file, validation, hits, content), key=lambda e: e.sort_key),
            files_checked=1,
        )
        if validation is not None and content is not None:
            if suggest_missing_closers(content, validation) is not None:
                report.suggested_closers[file] = [
                    o.closer for o in reversed(validation.open_constructs)
                ]
        return report


def merge_reports(reports: Sequence[DiagnosticReport]) -> DiagnosticReport:
    """Combine per-file reports, keeping the severity grouping."""
    merged = DiagnosticReport()
    entries: List[ReportEntry] = []
    for report in reports:
        entries.extend(report.entries)
        merged.files_checked += report.files_checked
        merged.suggested_closers.update(report.suggested_closers)
    merged.entries = sorted(entries, key=lambda e: e.sort_key)
    return merged
