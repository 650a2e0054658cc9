"""Direction-aware threshold evaluation."""

from __future__ import annotations

from enum import Enum

from fritzcheck.checks.models import CheckResult, Severity
from fritzcheck.checks.perfdata import PerformanceData
from fritzcheck.checks.thresholds import check_lower, check_upper, is_set


class Direction(str, Enum):
    BELOW = "below"   # floor: alert when the value drops under the range
    ABOVE = "above"   # ceiling: alert when the value exceeds the range


def _breached(direction: Direction, expression: str, value: float) -> bool:
    if direction is Direction.BELOW:
        return check_lower(expression, value)
    return check_upper(expression, value)


def evaluate(perfdata: PerformanceData, warning: str | None,
             critical: str | None, direction: Direction) -> Severity:
    """Evaluate ``perfdata.value`` against the optional thresholds.

    Warning is checked first, then critical. Severity only ever escalates.
    Every threshold that is set is also attached to the performance data.
    Raises ThresholdError for an expression that does not parse.
    """
    severity = Severity.OK

    if is_set(warning):
        perfdata.warning = warning.strip()
        if _breached(direction, warning, perfdata.value):
            severity = Severity.worst(severity, Severity.WARNING)

    if is_set(critical):
        perfdata.critical = critical.strip()
        if _breached(direction, critical, perfdata.value):
            severity = Severity.worst(severity, Severity.CRITICAL)

    return severity


def build_result(severity: int, message: str, perfdata: PerformanceData,
                 fallback: str) -> CheckResult:
    """Wrap an evaluated value into a CheckResult.

    Anything other than OK, WARNING or CRITICAL is reported as UNKNOWN with
    the *fallback* message and no performance data.
    """
    if severity in (Severity.OK, Severity.WARNING, Severity.CRITICAL):
        return CheckResult(Severity(severity), message, perfdata)
    return CheckResult.unknown(fallback)
