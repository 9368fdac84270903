"""JSON formatter for luaguard."""

import json

from ..report import DiagnosticReport
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the report as JSON."""

    def format(self, report: DiagnosticReport) -> str:
        return json.dumps(report.to_dict(), indent=2)
