"""Data models for structural validation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ErrorKind(Enum):
    """What class of problem a validation error describes."""

    SYNTAX = "syntax"  # unterminated string / comment / long bracket
    STRUCTURE = "structure"  # unbalanced block or bracket
    SECURITY = "security"  # reserved, never produced by the validator


class ErrorSeverity(Enum):
    """Severity of a validation error. Warnings belong to the scanner."""

    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ValidationError:
    """A single blocking problem found in proposed content."""

    file: str
    kind: ErrorKind
    message: str
    severity: ErrorSeverity
    line: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "line": self.line,
            "kind": self.kind.value,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class ValidationWarning:
    """Non-blocking note attached to a validation result."""

    file: str
    kind: str
    message: str
    line: Optional[int] = None

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line, "kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class OpenConstruct:
    """A block keyword or bracket still waiting for its closer."""

    construct: str  # "function", "if", "repeat", "(", "{", ...
    line: int
    closer: str  # "end", "until", ")", "}", "]"
    offset: int = 0


@dataclass
class ValidationResult:
    """Outcome of one validation call.

    ``is_valid`` is derived from ``errors`` so the two can never disagree.
    ``open_constructs`` lists unmatched openers in the order they were
    opened; it feeds the missing-closer suggestion.
    """

    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    open_constructs: List[OpenConstruct] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_critical(self) -> bool:
        return any(e.severity is ErrorSeverity.CRITICAL for e in self.errors)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }
