"""Lexical scanner for Lua / Luau source.

The scanner separates code from string and comment content. It does not
build a syntax tree: it emits the significant tokens (names, numbers,
string literals, punctuation) with their line numbers, records the spans
that hold non-code text, and reports literals that never terminate.

Recognised non-code forms:
    -- line comment
    --[[ block comment ]]      --[==[ leveled block comment ]==]
    [[ long string ]]          [==[ leveled long string ]==]
    "double" 'single' `interpolated` quoted strings with backslash escapes

A long bracket only closes on a closer of the same level, so
``[==[ a ]] b ]==]`` is one literal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class TokenType(Enum):
    NAME = "name"
    NUMBER = "number"
    STRING = "string"
    PUNCT = "punct"


class SpanKind(Enum):
    LINE_COMMENT = "line comment"
    BLOCK_COMMENT = "block comment"
    QUOTED_STRING = "string"
    LONG_STRING = "long string"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    line: int
    offset: int


@dataclass(frozen=True)
class Span:
    """A run of non-code text: ``content[start:end]``."""

    kind: SpanKind
    start: int
    end: int
    line: int


@dataclass(frozen=True)
class LexProblem:
    """A literal or comment that does not terminate where it must."""

    kind: SpanKind
    line: int
    message: str


@dataclass
class LexResult:
    tokens: List[Token] = field(default_factory=list)
    spans: List[Span] = field(default_factory=list)
    problems: List[LexProblem] = field(default_factory=list)


# Longest first so that "..." wins over ".." and "." etc.
_OPERATORS: Tuple[str, ...] = (
    "...", "..=", "//=",
    "==", "~=", "<=", ">=", "..", "//", "::", "->",
    "+=", "-=", "*=", "/=", "%=", "^=",
)

_QUOTES = "\"'`"


def long_bracket_level(content: str, pos: int) -> Optional[int]:
    """Return the level of a long-bracket opener at ``pos``, or None.

    ``[[`` has level 0, ``[=[`` level 1, ``[==[`` level 2 and so on.
    """
    if pos >= len(content) or content[pos] != "[":
        return None
    j = pos + 1
    while j < len(content) and content[j] == "=":
        j += 1
    if j < len(content) and content[j] == "[":
        return j - pos - 1
    return None


class LuaLexer:
    """Single-pass scanner over one document.

    Instances hold per-call state only; use :func:`tokenize` for a
    stateless entry point.
    """

    def __init__(self, content: str) -> None:
        self.content = content
        self.pos = 0
        self.line = 1
        self.result = LexResult()

    def run(self) -> LexResult:
        content = self.content
        n = len(content)

        while self.pos < n:
            c = content[self.pos]
            level = long_bracket_level(content, self.pos) if c == "[" else None

            if c == "\n":
                self.line += 1
                self.pos += 1
            elif c in " \t\r\f\v":
                self.pos += 1
            elif content.startswith("--", self.pos):
                self._comment()
            elif level is not None:
                self._long_literal(self.pos, SpanKind.LONG_STRING, self.pos, level)
            elif c in _QUOTES:
                self._quoted_string(c)
            elif c.isdigit() or (c == "." and self.pos + 1 < n and content[self.pos + 1].isdigit()):
                self._number()
            elif c.isalpha() or c == "_":
                self._name()
            else:
                self._punct()

        return self.result

    # -- non-code forms --

    def _comment(self) -> None:
        start = self.pos
        level = long_bracket_level(self.content, start + 2)
        if level is not None:
            self._long_literal(start, SpanKind.BLOCK_COMMENT, start + 2, level)
            return
        nl = self.content.find("\n", start)
        end = len(self.content) if nl == -1 else nl
        self.result.spans.append(Span(SpanKind.LINE_COMMENT, start, end, self.line))
        self.pos = end

    def _long_literal(self, start: int, kind: SpanKind, bracket_pos: int, level: int) -> None:
        content = self.content
        start_line = self.line
        closer = "]" + "=" * level + "]"
        body_start = bracket_pos + level + 2
        close_at = content.find(closer, body_start)

        if close_at == -1:
            end = len(content)
            what = "long comment" if kind is SpanKind.BLOCK_COMMENT else "long string"
            self.result.problems.append(
                LexProblem(
                    kind,
                    start_line,
                    f"unterminated {what} opened at line {start_line} (expected '{closer}')",
                )
            )
        else:
            end = close_at + len(closer)

        self.line += content.count("\n", start, end)
        self.result.spans.append(Span(kind, start, end, start_line))
        if kind is SpanKind.LONG_STRING:
            self.result.tokens.append(Token(TokenType.STRING, content[start:end], start_line, start))
        self.pos = end

    def _quoted_string(self, quote: str) -> None:
        content = self.content
        n = len(content)
        start = self.pos
        start_line = self.line
        j = start + 1
        closed = False

        while j < n:
            ch = content[j]
            if ch == "\\":
                nxt = content[j + 1] if j + 1 < n else ""
                if nxt in ("\r", "\n"):
                    # Escaped line break continues the literal; \r\n and \n\r count once
                    pair = content[j + 1 : j + 3]
                    if pair in ("\r\n", "\n\r"):
                        self.line += 1
                        j += 3
                        continue
                    if nxt == "\n":
                        self.line += 1
                elif nxt == "z":
                    # \z skips the following whitespace, line breaks included
                    k = j + 2
                    while k < n and content[k] in " \t\r\n\f\v":
                        if content[k] == "\n":
                            self.line += 1
                        k += 1
                    j = k
                    continue
                j += 2
                continue
            if ch == quote:
                closed = True
                j += 1
                break
            if ch == "\n":
                break
            j += 1

        end = min(j, n)
        if not closed:
            where = "end of input" if end >= n else f"end of line {self.line}"
            self.result.problems.append(
                LexProblem(
                    SpanKind.QUOTED_STRING,
                    start_line,
                    f"unfinished string starting at line {start_line} (reached {where})",
                )
            )

        self.result.spans.append(Span(SpanKind.QUOTED_STRING, start, end, start_line))
        self.result.tokens.append(Token(TokenType.STRING, content[start:end], start_line, start))
        self.pos = end

    # -- code tokens --

    def _number(self) -> None:
        content = self.content
        n = len(content)
        start = self.pos
        j = start
        while j < n:
            ch = content[j]
            if ch.isalnum() or ch in "._":
                j += 1
            elif ch in "+-" and content[j - 1] in "eE" and not content[start:j].lower().startswith("0x"):
                j += 1
            else:
                break
        self.result.tokens.append(Token(TokenType.NUMBER, content[start:j], self.line, start))
        self.pos = j

    def _name(self) -> None:
        content = self.content
        n = len(content)
        start = self.pos
        j = start
        while j < n and (content[j].isalnum() or content[j] == "_"):
            j += 1
        self.result.tokens.append(Token(TokenType.NAME, content[start:j], self.line, start))
        self.pos = j

    def _punct(self) -> None:
        for op in _OPERATORS:
            if self.content.startswith(op, self.pos):
                text = op
                break
        else:
            text = self.content[self.pos]
        self.result.tokens.append(Token(TokenType.PUNCT, text, self.line, self.pos))
        self.pos += len(text)


def tokenize(content: str) -> LexResult:
    """Scan ``content`` and return its tokens, non-code spans and problems."""
    return LuaLexer(content).run()


def code_view(content: str, spans: Optional[List[Span]] = None) -> str:
    """Return ``content`` with every string and comment blanked out.

    Length and line breaks are preserved, so offsets and line numbers in
    the view refer to the same place in the original text.
    """
    if spans is None:
        spans = tokenize(content).spans
    if not spans:
        return content

    chars = list(content)
    for span in spans:
        for i in range(span.start, span.end):
            if chars[i] != "\n":
                chars[i] = " "
    return "".join(chars)
