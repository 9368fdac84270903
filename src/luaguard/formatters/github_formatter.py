"""GitHub Actions formatter: workflow-command annotations."""

from ..report import DiagnosticReport, ReportEntry
from .base import BaseFormatter

_LEVELS = {"critical": "error", "error": "error", "warning": "warning", "info": "notice"}


def _escape(text: str) -> str:
    # Workflow commands end at a newline
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class GithubFormatter(BaseFormatter):
    """Output ``::error`` / ``::warning`` / ``::notice`` annotations, one per entry."""

    def _annotation(self, entry: ReportEntry) -> str:
        location = f"file={entry.file}"
        if entry.line is not None:
            location += f",line={entry.line}"
        message = f"[{entry.title}] {entry.description}"
        if entry.fix:
            message += f" Fix: {entry.fix}"
        return f"::{_LEVELS[entry.severity]} {location}::{_escape(message)}"

    def format(self, report: DiagnosticReport) -> str:
        return "\n".join(self._annotation(e) for e in report.entries)
