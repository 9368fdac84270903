"""Shared test fixtures for luaguard."""

from typing import Dict, Optional

import pytest

from luaguard.config import GuardConfig
from luaguard.history import VersionStore
from luaguard.mutation import MutationOrchestrator
from luaguard.validation import StructuralValidator

BALANCED = "function f()\n  if true then\n    print(1)\n  end\nend"
UNBALANCED = "function f()\n  if true then\n    print(1)\n  end"


class MemoryFiles:
    """In-memory file collaborator; optionally fails writes after a count."""

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self.files: Dict[str, str] = dict(files or {})
        self.writes = 0
        self.fail_after: Optional[int] = None

    def read(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def write(self, path: str, content: str) -> None:
        if self.fail_after is not None and self.writes >= self.fail_after:
            raise OSError("disk full")
        self.writes += 1
        self.files[path] = content


@pytest.fixture
def validator():
    return StructuralValidator()


@pytest.fixture
def store():
    return VersionStore()


@pytest.fixture
def memory_files():
    return MemoryFiles({"src/Main.luau": BALANCED})


@pytest.fixture
def orchestrator(store, memory_files):
    return MutationOrchestrator(store, StructuralValidator(), memory_files, GuardConfig())
