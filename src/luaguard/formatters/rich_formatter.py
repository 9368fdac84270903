"""Rich terminal formatter for luaguard."""

import io
from typing import Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from ..report import SEVERITY_ORDER, DiagnosticReport, ReportEntry
from .base import BaseFormatter

_STYLES = {
    "critical": "red bold",
    "error": "red",
    "warning": "yellow",
    "info": "cyan",
}


def _severity_label(severity: str) -> str:
    style = _STYLES[severity]
    return f"[{style}]{severity}[/{style}]"


class RichFormatter(BaseFormatter):
    """Summary table followed by one block per finding, most severe first.

    Args:
        console: Where ``render`` prints (defaults to stdout)
        show_snippets: Print the code snippet under each finding
    """

    def __init__(self, console: Optional[Console] = None, show_snippets: bool = True):
        self.console = console or Console()
        self.show_snippets = show_snippets

    def render(self, report: DiagnosticReport) -> None:
        self._print(self.console, report)

    def format(self, report: DiagnosticReport) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, width=100, force_terminal=False, color_system=None)
        self._print(console, report)
        return buffer.getvalue()

    def _print(self, console: Console, report: DiagnosticReport) -> None:
        counts = report.counts()
        table = Table(show_header=True, header_style="bold", expand=False)
        table.add_column("Severity")
        table.add_column("Count", justify="right")
        for severity in SEVERITY_ORDER:
            table.add_row(_severity_label(severity), str(counts[severity]))
        console.print(f"[bold]luaguard[/bold] - {report.files_checked} file(s) checked")
        console.print(table)

        if report.is_clean:
            console.print("[green]No problems found.[/green]")
            return

        for entry in report.entries:
            self._print_entry(console, entry)

        for file, closers in report.suggested_closers.items():
            console.print(
                f"[green]Suggested fix[/green] for {file}: append "
                + ", ".join(f"'{c}'" for c in closers)
            )

    def _print_entry(self, console: Console, entry: ReportEntry) -> None:
        location = entry.file if entry.line is None else f"{entry.file}:{entry.line}"
        console.print()
        console.print(
            f"{_severity_label(entry.severity)} [bold]{entry.title}[/bold] [dim]{location}[/dim]",
            highlight=False,
        )
        console.print(f"  {entry.description}", markup=False, highlight=False)
        if entry.fix:
            console.print(f"  [green]Fix:[/green] {entry.fix}", highlight=False)
        if self.show_snippets and entry.snippet:
            console.print(entry.snippet, markup=False, highlight=False)
        if entry.example:
            console.print(Syntax(entry.example, "lua", theme="ansi_dark", background_color="default"))
