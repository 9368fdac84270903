"""Errors from settings and from paths that escape the project root."""

from pathlib import Path
from typing import Dict, Optional

from .base import LuaguardError


class ConfigurationError(LuaguardError):
    """A config file or setting could not be used."""


class InvalidConfigError(ConfigurationError):
    """An environment variable held a value of the wrong type."""

    def __init__(self, key: str, value: str, reason: str):
        super().__init__(
            f"Cannot use {key}={value!r}",
            details={"reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class SecurityError(ConfigurationError):
    """A requested path resolves outside the directory luaguard may touch."""

    def __init__(self, reason: str, filepath: Optional[Path] = None):
        context: Dict[str, str] = {}
        if filepath is not None:
            context["path"] = str(filepath)
        super().__init__(f"Refused: {reason}", details=context)
        self.reason = reason
        self.filepath = filepath
