"""Monitoring-plugin performance data."""

from __future__ import annotations

from dataclasses import dataclass


def format_number(value: float) -> str:
    """Shortest round-trip form of *value*, without a trailing ``.0``."""
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


@dataclass
class PerformanceData:
    """One ``label=value[unit];warn;crit;min;max`` token.

    Segments that are unset stay as empty positional slots when a later
    segment is set, and are dropped entirely at the end of the token.
    """
    label: str
    value: float
    unit: str = ""
    warning: str | None = None
    critical: str | None = None
    minimum: float | None = None
    maximum: float | None = None

    def render(self) -> str:
        segments = [
            self.warning or "",
            self.critical or "",
            format_number(self.minimum) if self.minimum is not None else "",
            format_number(self.maximum) if self.maximum is not None else "",
        ]
        while segments and not segments[-1]:
            segments.pop()

        label = f"'{self.label}'" if " " in self.label else self.label
        token = f"{label}={format_number(self.value)}{self.unit}"
        if segments:
            token += ";" + ";".join(segments)
        return token
