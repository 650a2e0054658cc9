"""Shared probe plumbing: check context and the fetch-and-decode pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from fritzcheck.config.settings import ProbeConfig
from fritzcheck.device.base import SoapTransport
from fritzcheck.device.decoder import decode_response, parse_rate
from fritzcheck.device.dispatcher import await_responses, dispatch
from fritzcheck.device.models import Connection, SoapRequest, SoapResponse

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=SoapResponse)


@dataclass
class CheckContext:
    """Everything a probe needs for one run."""
    transport: SoapTransport
    connection: Connection
    probe: ProbeConfig

    def request(self, control_url: str, service: str, action: str) -> SoapRequest:
        return SoapRequest(
            connection=self.connection, control_url=control_url,
            service=service, action=action,
        )


@dataclass(frozen=True)
class RateQuery(Generic[R]):
    """How to obtain one rate: which call, which field, which conversion."""
    request: SoapRequest
    response_type: type[R]
    extract: Callable[[R], str]
    convert: Callable[[float], float]
    field_name: str = "rate"


async def fetch_rate(context: CheckContext, query: RateQuery) -> float:
    """Dispatch, await, decode, parse and convert a single rate.

    Every failure surfaces as a SoapError (or subclass).
    """
    task = dispatch(context.transport, query.request, debug=context.probe.debug)
    payload, = await await_responses([task], 1, context.probe.timeout)
    response = decode_response(payload, query.response_type)
    raw = query.extract(response)
    value = query.convert(parse_rate(raw, query.field_name))
    logger.debug("%s: raw=%r converted=%s", query.field_name, raw, value)
    return value


def first_of_history(history: str) -> str:
    """Most recent sample of a comma-separated ``newest,...,oldest`` history."""
    return history.split(",", 1)[0].strip()
