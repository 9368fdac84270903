"""Block and bracket balance checking for Lua / Luau.

Two independent stacks are kept while walking the token stream produced
by :mod:`luaguard.validation.lexer`:

- a block stack for ``function``, ``if``, ``for``, ``while``, ``do`` (all
  closed by ``end``) and ``repeat`` (closed by ``until``);
- a bracket stack for ``(``, ``{`` and ``[``.

Keywords and brackets inside strings and comments never reach the
walker because the lexer does not emit them as code tokens.

Every structural finding is ``critical``: the Lua loader refuses a file
with an unclosed, mismatched or stray construct just the same.

Luau if-expressions (``x = if a then b else c``) open no block. Their
``then`` / ``elseif`` / ``else`` keywords are tracked separately so that
an ``if`` directly after one of them is also an expression.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .lexer import LexResult, Token, TokenType, tokenize
from .models import (
    ErrorKind,
    ErrorSeverity,
    OpenConstruct,
    ValidationError,
    ValidationResult,
)

logger = logging.getLogger(__name__)

BRACKET_PAIRS = {"(": ")", "{": "}", "[": "]"}
CLOSING_BRACKETS = {v: k for k, v in BRACKET_PAIRS.items()}

# Tokens after which ``if`` starts a Luau if-expression rather than a statement
EXPRESSION_CONTEXT = frozenset(
    {
        "=", "(", ",", "{", "[", "return", "and", "or", "not",
        "==", "~=", "<", ">", "<=", ">=", "..", "+", "-", "*", "/", "//", "%", "^", "#",
        "+=", "-=", "*=", "/=", "//=", "%=", "^=", "..=",
    }
)

# A keyword right after these is a field or method name, not a keyword
_MEMBER_ACCESS = frozenset({".", ":"})


@dataclass
class _Open:
    construct: str
    line: int
    offset: int
    closer: str
    body_start: int
    awaiting_do: bool = False


@dataclass
class _ExprIf:
    block_depth: int
    awaiting: str


@dataclass(frozen=True)
class BlockSpan:
    """Extent of one block construct in the source.

    ``body_start`` is the offset just past the keyword that opens the body
    (``do`` for loops, the keyword itself otherwise). ``end`` is the offset
    of the closing keyword, or the length of the content when the block
    never closes.
    """

    construct: str
    line: int
    start: int
    body_start: int
    end: int
    closed: bool = True


class _BalanceWalker:
    """Walks one token stream; holds the per-call stacks."""

    def __init__(self, file: str) -> None:
        self.file = file
        self.blocks: List[_Open] = []
        self.brackets: List[_Open] = []
        self.errors: List[ValidationError] = []
        self.spans: List[BlockSpan] = []
        self.expr_ifs: List[_ExprIf] = []
        # Offset of the last then/elseif/else owned by an if-expression
        self._expr_branch_at = -1

    def walk(self, tokens: List[Token]) -> None:
        prev: Optional[Token] = None
        for tok in tokens:
            if tok.type is TokenType.NAME:
                if prev is None or prev.text not in _MEMBER_ACCESS:
                    self._keyword(tok, prev)
            elif tok.type is TokenType.PUNCT:
                self._bracket(tok)
            prev = tok

    # -- block keywords --

    def _keyword(self, tok: Token, prev: Optional[Token]) -> None:
        word = tok.text
        after = tok.offset + len(word)
        if word in ("function", "repeat"):
            closer = "until" if word == "repeat" else "end"
            self.blocks.append(_Open(word, tok.line, tok.offset, closer, after))
        elif word == "if":
            if self._starts_expression(prev):
                self.expr_ifs.append(_ExprIf(len(self.blocks), "then"))
                return
            self.blocks.append(_Open(word, tok.line, tok.offset, "end", after))
        elif word in ("for", "while"):
            self.blocks.append(_Open(word, tok.line, tok.offset, "end", after, awaiting_do=True))
        elif word == "do":
            if self.blocks and self.blocks[-1].awaiting_do:
                self.blocks[-1].awaiting_do = False
                self.blocks[-1].body_start = after
            else:
                self.blocks.append(_Open(word, tok.line, tok.offset, "end", after))
        elif word in ("then", "elseif", "else"):
            self._expression_branch(tok)
        elif word in ("end", "until"):
            self._close_block(tok)

    def _starts_expression(self, prev: Optional[Token]) -> bool:
        if prev is None:
            return False
        return prev.text in EXPRESSION_CONTEXT or prev.offset == self._expr_branch_at

    def _expression_branch(self, tok: Token) -> None:
        if not self.expr_ifs or self.expr_ifs[-1].block_depth != len(self.blocks):
            return
        current = self.expr_ifs[-1]
        if tok.text == "then" and current.awaiting == "then":
            current.awaiting = "else"
        elif tok.text == "elseif" and current.awaiting == "else":
            current.awaiting = "then"
        elif tok.text == "else" and current.awaiting == "else":
            self.expr_ifs.pop()
        else:
            return
        self._expr_branch_at = tok.offset

    def _close_block(self, tok: Token) -> None:
        found = tok.text
        if not self.blocks:
            self._error(tok.line, f"unexpected '{found}' at line {tok.line} with no open block")
            return
        top = self.blocks.pop()
        while self.expr_ifs and self.expr_ifs[-1].block_depth > len(self.blocks):
            self.expr_ifs.pop()
        self.spans.append(BlockSpan(top.construct, top.line, top.offset, top.body_start, tok.offset))
        if top.closer != found:
            self._error(
                tok.line,
                f"expected '{top.closer}' to close '{top.construct}' opened at line "
                f"{top.line}, found '{found}' at line {tok.line}",
            )

    # -- brackets --

    def _bracket(self, tok: Token) -> None:
        ch = tok.text
        if ch in BRACKET_PAIRS:
            self.brackets.append(_Open(ch, tok.line, tok.offset, BRACKET_PAIRS[ch], tok.offset + 1))
        elif ch in CLOSING_BRACKETS:
            if not self.brackets:
                self._error(tok.line, f"unexpected '{ch}' at line {tok.line} with no open bracket")
                return
            top = self.brackets.pop()
            if top.closer != ch:
                self._error(
                    tok.line,
                    f"expected '{top.closer}' to close '{top.construct}' opened at line "
                    f"{top.line}, found '{ch}' at line {tok.line}",
                )

    # -- end of input --

    def finish(self, content_length: int) -> List[OpenConstruct]:
        for block in self.blocks:
            self.spans.append(
                BlockSpan(
                    block.construct,
                    block.line,
                    block.offset,
                    block.body_start,
                    content_length,
                    closed=False,
                )
            )
        self.spans.sort(key=lambda s: s.start)

        still_open = sorted(self.blocks + self.brackets, key=lambda o: o.offset)
        for item in still_open:
            self.errors.append(
                ValidationError(
                    file=self.file,
                    line=item.line,
                    kind=ErrorKind.STRUCTURE,
                    message=(
                        f"missing close for {item.construct} opened at line {item.line} "
                        f"(expected '{item.closer}')"
                    ),
                    severity=ErrorSeverity.CRITICAL,
                )
            )
        return [OpenConstruct(o.construct, o.line, o.closer, o.offset) for o in still_open]

    def _error(self, line: int, message: str) -> None:
        self.errors.append(
            ValidationError(
                file=self.file,
                line=line,
                kind=ErrorKind.STRUCTURE,
                message=message,
                severity=ErrorSeverity.CRITICAL,
            )
        )


class StructuralValidator:
    """Checks that every block and bracket has a correctly nested closer.

    The validator is stateless between calls and safe to share.
    """

    def check_balance(self, content: str, file: str = "<content>") -> ValidationResult:
        """Validate ``content`` on its own, without a baseline."""
        lexed = tokenize(content)
        return self._check_lexed(lexed, file, len(content))

    def validate(
        self,
        previous_content: Optional[str],
        proposed_content: str,
        mode: str = "write",
        file: str = "<content>",
    ) -> ValidationResult:
        """Validate content proposed to replace ``previous_content``.

        Only the proposed content decides the result. The previous content
        is checked for logging purposes, so that a rejection of an edit to
        an already-broken file is distinguishable in the logs.
        """
        result = self.check_balance(proposed_content, file)
        if not result.is_valid:
            logger.debug(
                f"{mode}: {file} rejected with {len(result.errors)} structural error(s)"
            )
            if previous_content and not self.check_balance(previous_content, file).is_valid:
                logger.debug(f"{mode}: previous content of {file} was already unbalanced")
        return result

    def _check_lexed(self, lexed: LexResult, file: str, content_length: int) -> ValidationResult:
        errors: List[ValidationError] = [
            ValidationError(
                file=file,
                line=problem.line,
                kind=ErrorKind.SYNTAX,
                message=problem.message,
                severity=ErrorSeverity.CRITICAL,
            )
            for problem in lexed.problems
        ]

        walker = _BalanceWalker(file)
        walker.walk(lexed.tokens)
        open_constructs = walker.finish(content_length)
        errors.extend(walker.errors)
        errors.sort(key=lambda e: e.line if e.line is not None else 0)

        return ValidationResult(errors=errors, open_constructs=open_constructs)


def block_spans(content: str, lexed: Optional[LexResult] = None) -> List[BlockSpan]:
    """Return the extent of every block construct in ``content``, by start offset.

    Blocks that never close extend to the end of the content.
    """
    if lexed is None:
        lexed = tokenize(content)
    walker = _BalanceWalker("<content>")
    walker.walk(lexed.tokens)
    walker.finish(len(content))
    return walker.spans
