"""Base formatter interface for luaguard report rendering."""

from abc import ABC, abstractmethod

from ..report import DiagnosticReport


class BaseFormatter(ABC):
    """Abstract base class for report formatters."""

    def render(self, report: DiagnosticReport) -> None:
        """Print the report to stdout."""
        print(self.format(report))

    @abstractmethod
    def format(self, report: DiagnosticReport) -> str:
        """Return formatted string representation of the report."""
