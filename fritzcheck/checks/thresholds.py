"""Threshold range parsing (monitoring-plugin range syntax).

Supported forms::

    10      0 .. 10
    10:     10 .. +inf
    ~:10    -inf .. 10   (":10" is accepted as a shorthand)
    10:20   10 .. 20

Probes only ask whether a value lies below or above the range, so the
inverted ``@`` form is rejected.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


class ThresholdError(ValueError):
    """A threshold expression could not be parsed."""


@dataclass(frozen=True)
class Range:
    start: float
    end: float

    def is_below(self, value: float) -> bool:
        return value < self.start

    def is_above(self, value: float) -> bool:
        return value > self.end


def is_set(expression: str | None) -> bool:
    return expression is not None and expression.strip() != ""


def _parse_bound(text: str, expression: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise ThresholdError(f"Invalid threshold '{expression}'") from None
    if math.isnan(value):
        raise ThresholdError(f"Invalid threshold '{expression}'")
    return value


def parse_range(expression: str) -> Range:
    text = expression.strip()
    if not text:
        raise ThresholdError("Empty threshold")
    if text.startswith("@"):
        raise ThresholdError(
            f"Invalid threshold '{expression}': inverted ranges are not supported"
        )

    if ":" not in text:
        return Range(0.0, _parse_bound(text, expression))

    start_text, end_text = text.split(":", 1)
    if start_text in ("", "~"):
        start = -math.inf
    else:
        start = _parse_bound(start_text, expression)
    end = _parse_bound(end_text, expression) if end_text else math.inf

    if start > end:
        raise ThresholdError(
            f"Invalid threshold '{expression}': start is greater than end"
        )
    return Range(start, end)


def check_lower(expression: str, value: float) -> bool:
    """True if *value* lies below the range, i.e. a floor was breached."""
    return parse_range(expression).is_below(value)


def check_upper(expression: str, value: float) -> bool:
    """True if *value* lies above the range, i.e. a ceiling was breached."""
    return parse_range(expression).is_above(value)
