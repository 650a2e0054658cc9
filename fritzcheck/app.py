"""Application wiring: settings, transport and registry for one probe run."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from fritzcheck.checks.base import CheckContext
from fritzcheck.checks.models import CheckResult
from fritzcheck.checks.registry import CheckRegistry, build_default_registry
from fritzcheck.config.settings import Settings
from fritzcheck.device.base import SoapTransport
from fritzcheck.device.http_transport import HttpxTransport

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Send log records to stderr; stdout carries only the status line."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=debug,
    )
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


class Application:
    """Runs a single, stateless probe cycle."""

    def __init__(self, settings: Settings,
                 registry: CheckRegistry | None = None,
                 transport: SoapTransport | None = None) -> None:
        self.settings = settings
        self.registry = registry or build_default_registry()
        self._transport = transport

    def _create_transport(self) -> SoapTransport:
        return HttpxTransport(
            self.settings.router.connection(),
            verify_tls=self.settings.router.verify_tls,
            timeout=self.settings.probe.timeout,
        )

    async def run(self) -> CheckResult:
        probe = self.settings.probe
        transport = self._transport or self._create_transport()
        async with transport:
            context = CheckContext(
                transport=transport,
                connection=self.settings.router.connection(),
                probe=probe,
            )
            result = await self.registry.run(probe.method, context)
        logger.debug("Method %s finished with %s", probe.method,
                     result.severity.name)
        return result
