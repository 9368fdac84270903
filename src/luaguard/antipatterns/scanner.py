"""Anti-pattern scanner: evaluates a rule catalog against file content."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .catalog import DEFAULT_CATALOG
from .models import AntiPatternRule, DetectionHit, ScanContext

logger = logging.getLogger(__name__)


def offset_to_line(content: str, offset: int) -> int:
    """Map a 0-based character offset to a 1-based line number.

    Line lengths are accumulated (+1 per line break) until the offset
    falls inside a line's span. An offset sitting exactly on a line break
    belongs to the line that break ends, so the first containing line wins.
    """
    lines = content.split("\n")
    position = 0
    for index, line in enumerate(lines):
        if position <= offset <= position + len(line):
            return index + 1
        position += len(line) + 1
    return len(lines)


def truncate_match(text: str, limit: int = 50) -> str:
    """Shorten matched text for display."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class AntiPatternScanner:
    """Flags the first occurrence of each catalog rule in a document.

    The scanner keeps no state between calls: every scan builds its own
    :class:`ScanContext`, so scanning identical content twice yields
    identical hits.

    Args:
        rules: Rules to evaluate, in order. Defaults to the built-in catalog.
        code_only: Match against content with strings and comments blanked.
        display_length: Truncation length for ``DetectionHit.matched_text``.
    """

    def __init__(
        self,
        rules: Optional[Iterable[AntiPatternRule]] = None,
        code_only: bool = True,
        display_length: int = 50,
    ) -> None:
        self.rules: List[AntiPatternRule] = list(DEFAULT_CATALOG if rules is None else rules)
        self.code_only = code_only
        self.display_length = display_length

    def scan(self, content: str) -> List[DetectionHit]:
        """Return at most one hit per rule, in catalog order."""
        if not self.rules:
            return []

        context = ScanContext(content, code_only=self.code_only)
        hits: List[DetectionHit] = []
        for rule in self.rules:
            match = rule.find(context)
            if match is None:
                continue
            hits.append(
                DetectionHit(
                    rule=rule,
                    line=offset_to_line(content, match.start),
                    matched_text=truncate_match(
                        content[match.start:match.end], self.display_length
                    ),
                )
            )

        logger.debug(f"Anti-pattern scan: {len(hits)} hit(s) from {len(self.rules)} rule(s)")
        return hits
