"""Structure-aware matchers for rules a single regex cannot scope.

Each matcher restricts its lookahead to the body of the enclosing block
(via the block spans of the scan context) instead of the rest of the
file, so a ``wait()`` in an unrelated function does not hide an
unyielding loop.
"""

from __future__ import annotations

import re
from typing import Optional

from .models import RuleMatch, ScanContext

YIELD_CALL = re.compile(r"(?:\bwait|:Wait)\s*\(")
WHILE_TRUE = re.compile(r"while\s+true\s+do\b")
CHILDREN_CALL = re.compile(r":(?:GetChildren|GetDescendants)\s*\(")
TOUCHED_CONNECT = re.compile(r"\.Touched:Connect\s*\(")
DEBOUNCE = re.compile(r"debounce|cooldown", re.IGNORECASE)

LOOP_CONSTRUCTS = ("for", "while", "repeat")


def infinite_loop_without_yield(context: ScanContext) -> Optional[RuleMatch]:
    """``while true do`` whose body never yields."""
    text = context.text
    for span in context.blocks:
        if span.construct != "while":
            continue
        header = WHILE_TRUE.match(text, span.start)
        if header is None:
            continue
        if YIELD_CALL.search(text, span.body_start, span.end) is None:
            return RuleMatch(header.start(), header.end())
    return None


def repeat_without_yield(context: ScanContext) -> Optional[RuleMatch]:
    """``repeat ... until`` whose body never yields."""
    text = context.text
    for span in context.blocks:
        if span.construct != "repeat":
            continue
        if YIELD_CALL.search(text, span.body_start, span.end) is None:
            end = span.end + len("until") if span.closed else span.end
            return RuleMatch(span.start, min(end, len(text)))
    return None


def children_query_in_loop(context: ScanContext) -> Optional[RuleMatch]:
    """GetChildren/GetDescendants called inside a loop body.

    Calls in a ``for`` header (``for _, c in ipairs(x:GetChildren()) do``)
    run once and are not reported.
    """
    text = context.text
    first: Optional[RuleMatch] = None
    for span in context.blocks:
        if span.construct not in LOOP_CONSTRUCTS:
            continue
        m = CHILDREN_CALL.search(text, span.body_start, span.end)
        if m is not None and (first is None or m.start() < first.start):
            first = RuleMatch(m.start(), m.end())
    return first


def touched_without_debounce(context: ScanContext) -> Optional[RuleMatch]:
    """Inline ``.Touched`` handler with no debounce guard in its body.

    Handlers passed by name cannot be inspected and are skipped.
    """
    text = context.text
    for connect in TOUCHED_CONNECT.finditer(text):
        handler = next(
            (
                span
                for span in context.blocks
                if span.construct == "function" and span.start >= connect.end()
            ),
            None,
        )
        if handler is None or text[connect.end():handler.start].strip():
            continue
        if DEBOUNCE.search(text, handler.body_start, handler.end) is None:
            return RuleMatch(connect.start(), connect.end())
    return None
