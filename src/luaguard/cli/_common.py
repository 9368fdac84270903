"""Shared CLI helpers."""

from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console

from ..config import GuardConfig
from ..file_ops import LocalFileAccess
from ..history import VersionStore, load_history_file, save_history_file
from ..mutation import MutationOrchestrator
from ..validation import StructuralValidator

console = Console()


def get_config(ctx: typer.Context) -> GuardConfig:
    return ctx.obj["config"]


def get_root(ctx: typer.Context) -> Path:
    return ctx.obj["root"]


@dataclass
class Workspace:
    """Everything a mutating command needs, wired from the CLI context."""

    root: Path
    config: GuardConfig
    files: LocalFileAccess
    store: VersionStore
    orchestrator: MutationOrchestrator

    @property
    def history_path(self) -> Path:
        return self.root / self.config.history_file

    def key(self, target: Path) -> str:
        """History key for ``target``: its path relative to the root, POSIX style."""
        return self.files.resolve(str(target)).relative_to(self.files.root).as_posix()

    def save_history(self) -> None:
        save_history_file(self.store, self.history_path)


def open_workspace(ctx: typer.Context) -> Workspace:
    """Build the file collaborator, load persisted history and wire an orchestrator."""
    config = get_config(ctx)
    root = get_root(ctx)
    files = LocalFileAccess(root, max_file_size_bytes=config.max_file_size_bytes)
    store = VersionStore(max_entries=config.max_history_entries, chars_per_token=config.chars_per_token)
    load_history_file(store, root / config.history_file)
    orchestrator = MutationOrchestrator(store, StructuralValidator(), files, config)
    return Workspace(root, config, files, store, orchestrator)
