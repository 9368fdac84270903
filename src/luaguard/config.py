"""Configuration loading and management for luaguard.

Configuration sources are merged in priority order:
    1. Defaults (defined in GuardConfig)
    2. Global config (~/.luaguard.toml)
    3. Project config (./luaguard.toml)
    4. Explicit config file
    5. Environment variables (LUAGUARD_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(max_history_entries=10)
    >>> config.max_history_entries
    10
    >>> config.is_governed("src/server/Main.server.luau")
    True
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterator,
    Literal,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .exceptions import ConfigurationError, InvalidConfigError
from .logging_config import get_logger

logger = get_logger(__name__)

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_GOVERNED_EXTENSIONS: Tuple[str, ...] = (".lua", ".luau")


@dataclass(frozen=True)
class GuardConfig:
    """Configuration for the safe-mutation pipeline.

    Attributes:
        Structural validation:
            governed_extensions: File suffixes subject to structural validation

        History:
            max_history_entries: Snapshots kept per path (None = unbounded)
            history_file: JSON file the CLI persists history to
            chars_per_token: Divisor used for a snapshot's estimated cost

        Anti-pattern scanning:
            scan_code_only: Blank strings/comments before matching rules
            disabled_rules: Rule names skipped by the scanner
            match_display_length: Truncation length for matched text

        Reporting:
            snippet_context_lines: Lines of context around a reported line

        File access:
            max_file_size_mb: Largest file the local collaborator will read

        Output control:
            verbosity: Logging verbosity level
    """

    governed_extensions: Tuple[str, ...] = DEFAULT_GOVERNED_EXTENSIONS

    max_history_entries: Optional[int] = None
    history_file: str = ".luaguard/history.json"
    chars_per_token: int = 4

    scan_code_only: bool = True
    disabled_rules: Tuple[str, ...] = field(default_factory=tuple)
    match_display_length: int = 50

    snippet_context_lines: int = 3

    max_file_size_mb: float = 10.0

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Normalise sequences and reject out-of-range values."""
        # TOML arrays arrive as lists
        object.__setattr__(self, "governed_extensions", tuple(self.governed_extensions))
        object.__setattr__(self, "disabled_rules", tuple(self.disabled_rules))

        if not self.governed_extensions:
            raise ValueError("governed_extensions must not be empty")
        for ext in self.governed_extensions:
            if not ext.startswith("."):
                raise ValueError(f"governed extension must start with '.': {ext!r}")

        if self.max_history_entries is not None and self.max_history_entries < 1:
            raise ValueError("max_history_entries must be at least 1")
        if self.chars_per_token < 1:
            raise ValueError("chars_per_token must be at least 1")
        if self.match_display_length < 1:
            raise ValueError("match_display_length must be at least 1")
        if self.snippet_context_lines < 0:
            raise ValueError("snippet_context_lines must be non-negative")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """``max_file_size_mb`` as a byte count."""
        return int(self.max_file_size_mb * 1024 * 1024)

    def is_governed(self, file_path: str) -> bool:
        """True if ``file_path`` ends with a governed extension."""
        return str(file_path).lower().endswith(self.governed_extensions)


DEFAULT_CONFIG = GuardConfig()


GLOBAL_CONFIG_NAME = ".luaguard.toml"
PROJECT_CONFIG_NAME = "luaguard.toml"
ENV_PREFIX = "LUAGUARD_"

_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off"})


def load_config(config_file: Optional[Path] = None, **overrides) -> GuardConfig:
    """Build a GuardConfig from every configuration source.

    Later sources win: the global file, the project file, ``config_file``,
    ``LUAGUARD_*`` variables and finally ``overrides``. Overrides whose
    value is None are ignored, and the boolean ``verbose``/``quiet``
    flags are folded into ``verbosity``.

    Raises:
        ConfigurationError: If a file is missing, unreadable or holds
            unknown keys, or a value fails validation
        InvalidConfigError: If an environment variable cannot be parsed
    """
    if config_file is not None and not Path(config_file).exists():
        raise ConfigurationError(f"Config file not found: {config_file}")

    values: Dict[str, Any] = {}
    for label, path in _config_sources(config_file):
        logger.debug(f"Reading {label} config from {path}")
        values.update(_read_toml(path, label))

    from_env = _env_values()
    if from_env:
        logger.debug(f"Environment overrides: {', '.join(sorted(from_env))}")
    values.update(from_env)

    verbose = overrides.pop("verbose", False)
    quiet = overrides.pop("quiet", False)
    if quiet:
        values["verbosity"] = "quiet"
    elif verbose:
        values["verbosity"] = "verbose"
    values.update((key, value) for key, value in overrides.items() if value is not None)

    try:
        return GuardConfig(**values)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _config_sources(config_file: Optional[Path]) -> Iterator[Tuple[str, Path]]:
    for label, path in (
        ("global", Path.home() / GLOBAL_CONFIG_NAME),
        ("project", Path.cwd() / PROJECT_CONFIG_NAME),
    ):
        if path.exists():
            yield label, path
    if config_file is not None:
        yield "explicit", Path(config_file)


def _read_toml(path: Path, label: str) -> Dict[str, Any]:
    """Parsed settings from ``path``; a ``[luaguard]`` table takes precedence."""
    try:
        with open(path, "rb") as handle:
            data = tomllib.load(handle)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid {label} config '{path}': {e}")

    section = data.get("luaguard")
    return dict(section) if isinstance(section, dict) else data


def _env_values() -> Dict[str, Any]:
    """Settings from ``LUAGUARD_<FIELD>`` variables.

    Tuple fields take a comma-separated list, booleans take yes/no style
    words and Optional fields treat an empty value or ``none`` as unset.
    """
    hints = get_type_hints(GuardConfig)
    found: Dict[str, Any] = {}
    for name in (f.name for f in fields(GuardConfig)):
        key = ENV_PREFIX + name.upper()
        raw = os.environ.get(key)
        if raw is None:
            continue
        try:
            value = _coerce(raw, hints[name])
        except ValueError as e:
            raise InvalidConfigError(key, raw, str(e))
        if value is not None:
            found[name] = value
    return found


def _coerce(raw: str, hint: Any) -> Any:
    args = get_args(hint)
    if get_origin(hint) is Union and type(None) in args:
        if raw.strip().lower() in ("", "none"):
            return None
        hint = next(arg for arg in args if arg is not type(None))

    origin = get_origin(hint)
    if origin is tuple:
        return tuple(item.strip() for item in raw.split(",") if item.strip())
    if origin is Literal or hint is str:
        return raw
    if hint is bool:
        word = raw.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(f"expected a boolean word, got {raw!r}")
    if hint in (int, float):
        return hint(raw)
    return None
