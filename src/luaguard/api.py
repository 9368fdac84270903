"""Public API for luaguard.

Example:
    >>> from luaguard import check_source
    >>> report = check_source("Main.luau", "while true do\\nend\\n")
    >>> [e.title for e in report.entries]
    ['infinite-loop-no-wait']
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .antipatterns import AntiPatternScanner, select_rules
from .config import DEFAULT_CONFIG, GuardConfig
from .file_ops import expand_paths, read_text_file
from .logging_config import get_logger
from .report import DiagnosticReport, ReportGenerator, merge_reports
from .validation import StructuralValidator

logger = get_logger(__name__)


def build_scanner(config: GuardConfig = DEFAULT_CONFIG) -> AntiPatternScanner:
    """Scanner with the configured rules, view and display length."""
    return AntiPatternScanner(
        rules=select_rules(config.disabled_rules),
        code_only=config.scan_code_only,
        display_length=config.match_display_length,
    )


def check_source(
    path: str, content: str, config: GuardConfig = DEFAULT_CONFIG
) -> DiagnosticReport:
    """Validate structure and scan for anti-patterns in one document."""
    validation = StructuralValidator().check_balance(content, file=path)
    hits = build_scanner(config).scan(content)
    return ReportGenerator(config.snippet_context_lines).generate(path, validation, hits, content)


def check_paths(
    paths: Iterable[Path], config: GuardConfig = DEFAULT_CONFIG
) -> DiagnosticReport:
    """Check files and directory trees of governed scripts.

    Directories are expanded to the governed files they contain; files
    named explicitly are checked whatever their extension.

    Raises:
        FileAccessError: If a file cannot be read
    """
    validator = StructuralValidator()
    scanner = build_scanner(config)
    generator = ReportGenerator(config.snippet_context_lines)

    reports: List[DiagnosticReport] = []
    for filepath in expand_paths(paths, config.governed_extensions):
        content = read_text_file(filepath, config.max_file_size_bytes)
        validation = validator.check_balance(content, file=str(filepath))
        hits = scanner.scan(content)
        reports.append(generator.generate(str(filepath), validation, hits, content))
        logger.debug(f"Checked {filepath}: {len(validation.errors)} error(s), {len(hits)} hit(s)")

    return merge_reports(reports)
