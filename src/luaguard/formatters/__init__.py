"""Output formatters for luaguard reports."""

from .base import BaseFormatter
from .github_formatter import GithubFormatter
from .json_formatter import JsonFormatter
from .markdown_formatter import MarkdownFormatter
from .rich_formatter import RichFormatter

FORMATTERS = {
    "rich": RichFormatter,
    "json": JsonFormatter,
    "markdown": MarkdownFormatter,
    "github": GithubFormatter,
}


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "rich", "json", "markdown", "github"

    Raises:
        ValueError: If name is not recognized
    """
    cls = FORMATTERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(FORMATTERS))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "RichFormatter",
    "JsonFormatter",
    "MarkdownFormatter",
    "GithubFormatter",
    "FORMATTERS",
    "get_formatter",
]
