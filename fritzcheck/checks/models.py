"""Check result models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from fritzcheck.checks.perfdata import PerformanceData


class Severity(IntEnum):
    """Plugin severity, ordered from best to worst. Values are exit codes."""
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @classmethod
    def worst(cls, *severities: Severity) -> Severity:
        return max(severities, default=cls.OK)


@dataclass
class CheckResult:
    severity: Severity
    message: str
    perfdata: PerformanceData | None = None

    @classmethod
    def unknown(cls, message: str) -> CheckResult:
        return cls(severity=Severity.UNKNOWN, message=message)

    @property
    def exit_code(self) -> int:
        return int(self.severity)

    def status_line(self) -> str:
        """Render the single plugin output line, without trailing newline."""
        line = f"{self.severity.name} - {self.message}"
        if self.perfdata is not None:
            line += f" {self.perfdata.render()}"
        return line
