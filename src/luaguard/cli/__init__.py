"""Command-line interface: the root callback plus every subcommand."""

from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..config import load_config
from ..exceptions import LuaguardError
from ..logging_config import setup_logging
from ._common import console

app = typer.Typer(
    name="luaguard",
    help="luaguard - safe edits and anti-pattern checks for Lua / Luau scripts",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"luaguard {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Guard edits to Lua / Luau scripts: snapshot before writing, reject
    unbalanced code with automatic rollback, and flag known anti-patterns.

    [bold cyan]Examples:[/bold cyan]

      luaguard check src/

      luaguard apply src/Main.server.luau /tmp/proposed.luau

      luaguard history src/Main.server.luau
    """
    try:
        settings = load_config(config_file=config, verbose=verbose, quiet=quiet)
    except LuaguardError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(
        verbose=settings.verbosity == "verbose",
        quiet=settings.verbosity == "quiet",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = settings
    ctx.obj["root"] = (path or Path.cwd()).resolve()


# Import subcommands to register them
from .check import check as _check, rules as _rules, scan as _scan  # noqa: F401, E402
from .mutate import apply as _apply, patch as _patch  # noqa: F401, E402
from .history import history as _history, rollback as _rollback  # noqa: F401, E402


def main() -> None:
    app()
