"""Anti-pattern rule and detection models.

Rules are declarative: a name, a severity, and either a compiled regular
expression or a matcher callable that inspects the scan context. The
first match wins; a rule never produces more than one hit per scan.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Callable, List, Optional, Pattern

from ..validation.lexer import LexResult, code_view, tokenize
from ..validation.structure import BlockSpan, block_spans


class RuleSeverity(Enum):
    """Advisory severity scale. Never blocks a commit."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class RuleMatch:
    """Offsets of a rule match in the scanned content."""

    start: int
    end: int


class ScanContext:
    """Per-scan view of one document.

    Built fresh for every scan and discarded afterwards. Derived views
    (lexing, code-only text, block spans) are computed on first use.
    """

    def __init__(self, content: str, code_only: bool = True) -> None:
        self.content = content
        self.code_only = code_only

    @cached_property
    def lexed(self) -> LexResult:
        return tokenize(self.content)

    @cached_property
    def text(self) -> str:
        """The text rules match against."""
        if not self.code_only:
            return self.content
        return code_view(self.content, self.lexed.spans)

    @cached_property
    def blocks(self) -> List[BlockSpan]:
        return block_spans(self.content, self.lexed)


Matcher = Callable[[ScanContext], Optional[RuleMatch]]


@dataclass(frozen=True)
class AntiPatternRule:
    """A textual code shape known to cause problems.

    Attributes:
        name:        Unique rule identifier (e.g. "wait-deprecated").
        description: What the rule detects.
        severity:    Advisory severity.
        pattern:     Regular expression matched against the scan text.
        matcher:     Callable used instead of ``pattern`` for rules that
                     need block structure (e.g. loop bodies).
        fix:         Suggested fix.
        example:     Example snippet showing the fix.
        category:    Catalog section (performance, memory, ...).
    """

    name: str
    description: str
    severity: RuleSeverity
    pattern: Optional[Pattern[str]] = None
    matcher: Optional[Matcher] = None
    fix: Optional[str] = None
    example: Optional[str] = None
    category: str = ""

    def __post_init__(self) -> None:
        if (self.pattern is None) == (self.matcher is None):
            raise ValueError(f"rule {self.name!r} needs exactly one of pattern or matcher")

    def find(self, context: ScanContext) -> Optional[RuleMatch]:
        """Return the first match of this rule in ``context``, if any."""
        if self.matcher is not None:
            return self.matcher(context)
        m = self.pattern.search(context.text)  # type: ignore[union-attr]
        if m is None:
            return None
        return RuleMatch(m.start(), m.end())


@dataclass(frozen=True)
class DetectionHit:
    """One rule firing on one line of scanned content."""

    rule: AntiPatternRule
    line: int
    matched_text: str

    def to_dict(self) -> dict:
        return {
            "rule": self.rule.name,
            "severity": self.rule.severity.value,
            "line": self.line,
            "description": self.rule.description,
            "match": self.matched_text,
            "fix": self.rule.fix,
            "example": self.rule.example,
        }
