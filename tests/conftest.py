"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from fritzcheck.checks.base import CheckContext
from fritzcheck.config.settings import ProbeConfig, RouterConfig, Settings
from fritzcheck.device.base import SoapTransport
from fritzcheck.device.models import Connection, SoapRequest

SOAP_ENV = "http://schemas.xmlsoap.org/soap/envelope/"


def soap_response(service: str, action: str, fields: dict[str, str]) -> bytes:
    """Build a TR-064 response envelope the way a FRITZ!Box sends it."""
    body = "".join(f"<{name}>{value}</{name}>" for name, value in fields.items())
    return (
        '<?xml version="1.0"?>\n'
        f'<s:Envelope xmlns:s="{SOAP_ENV}" '
        's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
        "<s:Body>"
        f'<u:{action}Response xmlns:u="urn:dslforum-org:service:{service}:1">'
        f"{body}"
        f"</u:{action}Response>"
        "</s:Body></s:Envelope>"
    ).encode()


def dsl_info(downstream: str = "16000", upstream: str = "2000") -> bytes:
    return soap_response("WANDSLInterfaceConfig", "GetInfo", {
        "NewEnable": "1",
        "NewStatus": "Up",
        "NewUpstreamCurrRate": upstream,
        "NewDownstreamCurrRate": downstream,
    })


def link_properties(downstream: str = "100000000",
                    upstream: str = "40000000") -> bytes:
    return soap_response("WANCommonInterfaceConfig", "GetCommonLinkProperties", {
        "NewWANAccessType": "DSL",
        "NewLayer1UpstreamMaxBitRate": upstream,
        "NewLayer1DownstreamMaxBitRate": downstream,
        "NewPhysicalLinkStatus": "Up",
    })


def online_monitor(ds: str = "500000,480000", us: str = "25000,20000") -> bytes:
    return soap_response("WANCommonInterfaceConfig", "X_AVM-DE_GetOnlineMonitor", {
        "NewTotalNumberSyncGroups": "1",
        "NewSyncGroupName": "sync_dsl",
        "Newds_current_bps": ds,
        "Newus_current_bps": us,
    })


class FakeTransport(SoapTransport):
    """Answers calls from a table keyed by action name.

    A value may be bytes (returned), an exception (raised), or the string
    ``"hang"`` (never answers until cancelled).
    """

    def __init__(self, responses: dict[str, bytes | Exception | str]) -> None:
        self.responses = responses
        self.calls: list[SoapRequest] = []
        self.cancelled: list[str] = []
        self.closed = False

    async def call(self, request: SoapRequest) -> bytes:
        self.calls.append(request)
        answer = self.responses[request.action]
        if answer == "hang":
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                self.cancelled.append(request.action)
                raise
        if isinstance(answer, Exception):
            raise answer
        return answer

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def connection() -> Connection:
    return Connection(host="192.168.178.1", port=49443,
                      username="monitor", password="secret")


@pytest.fixture
def sample_settings() -> Settings:
    return Settings(
        router=RouterConfig(hostname="192.168.178.1", username="monitor",
                            password="secret"),
        probe=ProbeConfig(method="downstream_max", modelgroup="DSL",
                          timeout=5, divisor_max=1000, divisor_current=1000),
    )


@pytest.fixture
def make_context(connection: Connection) -> Callable[..., CheckContext]:
    def factory(transport: SoapTransport, **probe: object) -> CheckContext:
        defaults: dict[str, object] = {
            "modelgroup": "DSL", "timeout": 5,
            "divisor_max": 1000, "divisor_current": 1000,
        }
        defaults.update(probe)
        return CheckContext(
            transport=transport, connection=connection,
            probe=ProbeConfig(**defaults),
        )
    return factory
