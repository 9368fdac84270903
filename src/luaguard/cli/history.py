"""History CLI commands -- list, clear and restore snapshots."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..exceptions import LuaguardError
from ..history import Snapshot
from . import app
from ._common import console, open_workspace


def _summary_text(snapshot: Snapshot) -> str:
    summary = snapshot.patch_summary
    parts = []
    if summary.additions:
        parts.append(f"+{len(summary.additions)}")
    if summary.deletions:
        parts.append(f"-{len(summary.deletions)}")
    if summary.modifications:
        parts.append(f"~{len(summary.modifications)}")
    return " ".join(parts) or "-"


@app.command()
def history(
    ctx: typer.Context,
    target: Optional[Path] = typer.Argument(None, help="Only show this script"),
    clear: bool = typer.Option(False, "--clear", help="Delete the listed history"),
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
):
    """
    List snapshots taken before each write, oldest first.

    [bold cyan]Examples:[/bold cyan]

      luaguard history

      luaguard history src/Main.server.luau --json

      luaguard history --clear
    """
    try:
        ws = open_workspace(ctx)
        key = ws.key(target) if target is not None else None
        if clear:
            ws.store.clear_history(key)
            ws.save_history()
            console.print(f"[green]History cleared[/green] for {key or 'all scripts'}")
            return
        entries = ws.store.get_history(key)
    except LuaguardError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        data = {
            path: [
                {
                    "version": index,
                    "timestamp": s.timestamp,
                    "estimated_cost": s.estimated_cost,
                    "patch_summary": s.patch_summary.to_dict(),
                }
                for index, s in enumerate(snapshots)
            ]
            for path, snapshots in entries.items()
        }
        typer.echo(json.dumps(data, indent=2))
        return

    if not any(entries.values()):
        console.print("[yellow]No snapshots recorded yet.[/yellow]")
        return

    table = Table(title="Snapshot history", show_header=True, header_style="bold")
    table.add_column("Script")
    table.add_column("Version", justify="right")
    table.add_column("Timestamp")
    table.add_column("Changes")
    table.add_column("Est. tokens", justify="right")
    for path, snapshots in sorted(entries.items()):
        for index, s in enumerate(snapshots):
            table.add_row(path, str(index), s.timestamp, _summary_text(s), str(s.estimated_cost))
    console.print(table)
    console.print(f"[dim]Total estimated tokens: {ws.store.total_estimated_cost()}[/dim]")


@app.command()
def rollback(
    ctx: typer.Context,
    target: Path = typer.Argument(..., help="Script to restore"),
    version: Optional[int] = typer.Option(
        None, "--version", "-V", help="Snapshot index (default: most recent)", min=0
    ),
):
    """
    Restore a script from its snapshot history.

    [bold cyan]Examples:[/bold cyan]

      luaguard rollback src/Main.server.luau

      luaguard rollback src/Main.server.luau --version 0
    """
    try:
        ws = open_workspace(ctx)
        key = ws.key(target)
        result = ws.orchestrator.restore(key, version)
    except LuaguardError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Restored[/green] {key} to version {result.version}")
