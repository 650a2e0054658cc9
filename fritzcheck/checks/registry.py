"""Check registry: discovery and dispatch for probe methods."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fritzcheck.checks.base import CheckContext
from fritzcheck.checks.models import CheckResult

logger = logging.getLogger(__name__)

# Type alias for check functions
CheckFunc = Callable[[CheckContext], Awaitable[CheckResult]]


class CheckRegistry:
    """Registry of check functions keyed by method name."""

    def __init__(self) -> None:
        self._checks: dict[str, CheckFunc] = {}

    def register(self, method: str, func: CheckFunc) -> None:
        if method in self._checks:
            raise ValueError(f"Method '{method}' is already registered")
        self._checks[method] = func

    def get_check(self, method: str) -> CheckFunc | None:
        return self._checks.get(method.strip().lower())

    def methods(self) -> list[str]:
        return list(self._checks.keys())

    async def run(self, method: str, context: CheckContext) -> CheckResult:
        """Run one method. Unknown methods report UNKNOWN."""
        check_func = self.get_check(method)
        if check_func is None:
            logger.error("Unknown method %r (known: %s)", method,
                         ", ".join(self.methods()))
            return CheckResult.unknown(f"Unknown method '{method}'")
        logger.debug("Running %s against %s", check_func.__name__,
                     context.connection.host)
        return await check_func(context)


def build_default_registry() -> CheckRegistry:
    """Build a registry with all bandwidth checks."""
    from fritzcheck.checks.bandwidth import (
        check_downstream_current,
        check_downstream_max,
        check_downstream_usage,
        check_upstream_current,
        check_upstream_max,
        check_upstream_usage,
    )

    registry = CheckRegistry()

    registry.register("downstream_max", check_downstream_max)
    registry.register("downstream_current", check_downstream_current)
    registry.register("downstream_usage", check_downstream_usage)

    registry.register("upstream_max", check_upstream_max)
    registry.register("upstream_current", check_upstream_current)
    registry.register("upstream_usage", check_upstream_usage)

    return registry
