"""Anti-pattern detection: rule catalog and scanner."""

from .catalog import DEFAULT_CATALOG, rules_by_name, select_rules
from .models import AntiPatternRule, DetectionHit, RuleMatch, RuleSeverity, ScanContext
from .scanner import AntiPatternScanner, offset_to_line, truncate_match

__all__ = [
    "AntiPatternScanner",
    "AntiPatternRule",
    "DetectionHit",
    "RuleMatch",
    "RuleSeverity",
    "ScanContext",
    "DEFAULT_CATALOG",
    "rules_by_name",
    "select_rules",
    "offset_to_line",
    "truncate_match",
]
