"""Structural validation: lexical scanning and block/bracket balance."""

from .autofix import suggest_missing_closers
from .lexer import LexResult, Token, TokenType, code_view, tokenize
from .models import (
    ErrorKind,
    ErrorSeverity,
    OpenConstruct,
    ValidationError,
    ValidationResult,
    ValidationWarning,
)
from .structure import BlockSpan, StructuralValidator, block_spans

__all__ = [
    "StructuralValidator",
    "BlockSpan",
    "block_spans",
    "ValidationResult",
    "ValidationError",
    "ValidationWarning",
    "OpenConstruct",
    "ErrorKind",
    "ErrorSeverity",
    "LexResult",
    "Token",
    "TokenType",
    "tokenize",
    "code_view",
    "suggest_missing_closers",
]
