"""Root of the luaguard exception hierarchy."""

from typing import Any, Mapping, Optional


class LuaguardError(Exception):
    """Raised for every failure luaguard reports to its caller.

    ``details`` holds context as strings; ``str(error)`` renders them as
    ``message (key=value, ...)``.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = {key: str(value) for key, value in (details or {}).items()}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
