"""Markdown formatter, suitable for a pull-request comment."""

from typing import List

from ..report import SEVERITY_ORDER, DiagnosticReport
from .base import BaseFormatter

_HEADINGS = {
    "critical": "Critical",
    "error": "Errors",
    "warning": "Warnings",
    "info": "Notes",
}


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


class MarkdownFormatter(BaseFormatter):
    """One table per severity, most severe first."""

    def format(self, report: DiagnosticReport) -> str:
        lines: List[str] = ["## luaguard report", ""]
        counts = report.counts()
        summary = ", ".join(f"{counts[s]} {s}" for s in SEVERITY_ORDER)
        lines.append(f"**{report.files_checked} file(s) checked:** {summary}")

        if report.is_clean:
            lines.append("")
            lines.append("No problems found.")
            return "\n".join(lines)

        for severity, entries in report.by_severity().items():
            if not entries:
                continue
            lines.append("")
            lines.append(f"### {_HEADINGS[severity]}")
            lines.append("")
            lines.append("| File | Line | Check | Description | Fix |")
            lines.append("|------|------|-------|-------------|-----|")
            for e in entries:
                line = str(e.line) if e.line is not None else ""
                lines.append(
                    f"| `{e.file}` | {line} | {e.title} | {_cell(e.description)} | "
                    f"{_cell(e.fix or '')} |"
                )

        if report.suggested_closers:
            lines.append("")
            lines.append("### Suggested fixes")
            lines.append("")
            for file, closers in report.suggested_closers.items():
                lines.append(f"- `{file}`: append {', '.join(f'`{c}`' for c in closers)}")

        return "\n".join(lines)
