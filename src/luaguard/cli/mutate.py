"""Mutating commands: apply and patch, both routed through the orchestrator."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..api import check_source
from ..exceptions import LuaguardError
from ..file_ops import read_text_file
from ..formatters import RichFormatter
from ..mutation import MutationOutcome
from ..patching import PATCH_KINDS, PatchOperation
from . import app
from ._common import Workspace, console, open_workspace

# Exit status when the rejected write could not be rolled back
EXIT_ROLLBACK_FAILED = 2


def _show_commit(ws: Workspace, key: str) -> None:
    console.print(f"[green]Committed[/green] {key}")
    if not ws.config.is_governed(key):
        return
    try:
        content = ws.files.read(key)
    except (LuaguardError, OSError) as e:
        console.print(f"[yellow]Warning:[/yellow] committed file not scanned: {e}")
        return
    report = check_source(key, content, ws.config)
    if not report.is_clean:
        RichFormatter(console=console).render(report)


def _report_outcome(ws: Workspace, key: str, outcome: MutationOutcome) -> None:
    """Print the outcome, persist history, and exit non-zero unless committed and saved."""
    try:
        ws.save_history()
        history_saved = True
    except LuaguardError as e:
        console.print(f"[red]Error:[/red] {e}")
        history_saved = False

    if outcome.success:
        _show_commit(ws, key)
        if not history_saved:
            raise typer.Exit(1)
        return

    result = outcome.validation_result
    if result is not None:
        for error in result.errors:
            line = f":{error.line}" if error.line is not None else ""
            console.print(
                f"  [red]{error.severity.value}[/red] {key}{line} {error.message}",
                highlight=False,
            )

    if outcome.rollback_performed:
        console.print(f"[yellow]Rejected:[/yellow] {key} restored to its previous content")
        raise typer.Exit(1)

    console.print(f"[red bold]{outcome.error}[/red bold]")
    raise typer.Exit(EXIT_ROLLBACK_FAILED)


@app.command()
def apply(
    ctx: typer.Context,
    target: Path = typer.Argument(..., help="Script to overwrite (inside the project root)"),
    source: Path = typer.Argument(
        ..., help="File holding the proposed content", exists=True, dir_okay=False
    ),
):
    """
    Replace a script's content with SOURCE, safely.

    The current content is snapshotted first. If the new content is not
    structurally balanced it is rolled back automatically (exit 1); if the
    rollback itself fails the exit status is 2.

    [bold cyan]Examples:[/bold cyan]

      luaguard apply src/Main.server.luau /tmp/proposed.luau
    """
    try:
        ws = open_workspace(ctx)
        key = ws.key(target)
        proposed = read_text_file(source, ws.config.max_file_size_bytes)
        outcome = ws.orchestrator.mutate(key, proposed)
    except LuaguardError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _report_outcome(ws, key, outcome)


@app.command()
def patch(
    ctx: typer.Context,
    target: Path = typer.Argument(..., help="Script to patch (inside the project root)"),
    op: str = typer.Option(
        ...,
        "--op",
        help="Patch operation",
        click_type=click.Choice(list(PATCH_KINDS)),
    ),
    start: int = typer.Option(..., "--start", help="First line (1-based)", min=1),
    end: Optional[int] = typer.Option(None, "--end", help="Last line, inclusive", min=1),
    content_file: Optional[Path] = typer.Option(
        None,
        "--content-file",
        help="File holding the text to insert or replace with",
        exists=True,
        dir_okay=False,
    ),
):
    """
    Apply a line patch to a script, safely.

    [bold cyan]Examples:[/bold cyan]

      luaguard patch src/Main.luau --op delete --start 10 --end 12

      luaguard patch src/Main.luau --op insert --start 1 --content-file header.lua
    """
    try:
        ws = open_workspace(ctx)
        key = ws.key(target)
        new_content = None
        if content_file is not None:
            new_content = read_text_file(content_file, ws.config.max_file_size_bytes)
            # A trailing newline in the file would add an empty line
            if new_content.endswith("\n"):
                new_content = new_content[:-1]
        operation = PatchOperation(
            script_path=key,
            operation=op,
            line_start=start,
            line_end=end,
            new_content=new_content,
        )
        outcome = ws.orchestrator.apply_patch(operation)
    except (LuaguardError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _report_outcome(ws, key, outcome)
