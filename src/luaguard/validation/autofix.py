"""Missing-closer suggestions for content that ends with open constructs."""

from __future__ import annotations

from typing import Optional

from .models import ErrorKind, ValidationResult


def suggest_missing_closers(content: str, result: ValidationResult) -> Optional[str]:
    """Return ``content`` with the closers it lacks appended, or None.

    Only the "ran out of input" case is handled: if the result carries any
    syntax error or a misplaced closer, appending text would not repair
    it and None is returned. ``repeat`` blocks are never closed
    automatically because their ``until`` needs a condition.

    The suggestion is never applied by the pipeline; callers decide.
    """
    if not result.open_constructs:
        return None
    if len(result.errors) != len(result.open_constructs):
        return None
    if any(e.kind is ErrorKind.SYNTAX for e in result.errors):
        return None
    if any(o.construct == "repeat" for o in result.open_constructs):
        return None

    closers = [o.closer for o in reversed(result.open_constructs)]
    return content.rstrip() + "\n" + "\n".join(closers) + "\n"
