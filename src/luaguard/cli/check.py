"""Read-only commands: check, scan and rules."""

import json
from pathlib import Path
from typing import List

import click
import typer
from rich.table import Table

from ..antipatterns import DEFAULT_CATALOG
from ..api import build_scanner, check_paths
from ..exceptions import LuaguardError
from ..file_ops import read_text_file
from ..formatters import FORMATTERS, RichFormatter, get_formatter
from . import app
from ._common import console, get_config

_SEVERITY_STYLES = {"error": "red", "warning": "yellow", "info": "cyan"}


@app.command()
def check(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(
        ...,
        help="Script files or directories to check",
        exists=True,
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format",
        click_type=click.Choice(sorted(FORMATTERS), case_sensitive=False),
    ),
):
    """
    Check scripts for structural errors and anti-patterns.

    Exits with status 1 when any file has a structural error. Anti-pattern
    findings are advisory and never change the exit status.

    [bold cyan]Examples:[/bold cyan]

      luaguard check src/

      luaguard check src/Main.server.luau --format github
    """
    try:
        report = check_paths(paths, get_config(ctx))
    except (LuaguardError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if output_format == "rich":
        RichFormatter(console=console).render(report)
    else:
        typer.echo(get_formatter(output_format).format(report))

    if report.has_structural_errors:
        raise typer.Exit(1)


@app.command()
def scan(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Script to scan", exists=True, dir_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
):
    """List anti-pattern hits in one script (first occurrence per rule)."""
    config = get_config(ctx)
    try:
        content = read_text_file(file, config.max_file_size_bytes)
        hits = build_scanner(config).scan(content)
    except (LuaguardError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps([h.to_dict() for h in hits], indent=2))
        return

    if not hits:
        console.print("[green]No anti-patterns found.[/green]")
        return

    table = Table(title=str(file), show_header=True, header_style="bold")
    table.add_column("Line", justify="right")
    table.add_column("Severity")
    table.add_column("Rule")
    table.add_column("Match", overflow="fold")
    for hit in hits:
        style = _SEVERITY_STYLES[hit.rule.severity.value]
        table.add_row(
            str(hit.line),
            f"[{style}]{hit.rule.severity.value}[/{style}]",
            hit.rule.name,
            hit.matched_text,
        )
    console.print(table)


@app.command()
def rules(
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
):
    """List the built-in anti-pattern rules in evaluation order."""
    if json_output:
        data = [
            {
                "name": r.name,
                "severity": r.severity.value,
                "category": r.category,
                "description": r.description,
                "fix": r.fix,
            }
            for r in DEFAULT_CATALOG
        ]
        typer.echo(json.dumps(data, indent=2))
        return

    table = Table(title="Anti-pattern rules", show_header=True, header_style="bold")
    table.add_column("Rule")
    table.add_column("Severity")
    table.add_column("Category")
    table.add_column("Description")
    for rule in DEFAULT_CATALOG:
        style = _SEVERITY_STYLES[rule.severity.value]
        table.add_row(
            rule.name,
            f"[{style}]{rule.severity.value}[/{style}]",
            rule.category,
            rule.description,
        )
    console.print(table)
