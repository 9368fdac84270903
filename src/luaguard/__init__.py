"""
luaguard - safe edits and anti-pattern checks for Lua / Luau scripts.

Every write to a governed script is snapshotted first, validated for
block and bracket balance, and rolled back automatically when the new
content would not load. Committed content can be scanned against a
catalog of Roblox Luau anti-patterns.
"""

__version__ = "0.1.0"

from .antipatterns import AntiPatternScanner, DetectionHit
from .api import check_paths, check_source
from .config import GuardConfig, load_config
from .exceptions import LuaguardError
from .file_ops import LocalFileAccess
from .history import VersionStore
from .mutation import MutationOrchestrator, MutationOutcome
from .report import DiagnosticReport, ReportGenerator
from .validation import StructuralValidator, ValidationResult

__all__ = [
    "__version__",
    "check_source",
    "check_paths",
    "GuardConfig",
    "load_config",
    "LuaguardError",
    "StructuralValidator",
    "ValidationResult",
    "AntiPatternScanner",
    "DetectionHit",
    "VersionStore",
    "MutationOrchestrator",
    "MutationOutcome",
    "LocalFileAccess",
    "ReportGenerator",
    "DiagnosticReport",
]
