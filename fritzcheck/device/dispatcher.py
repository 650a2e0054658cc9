"""Call dispatch and response collection.

Every SOAP call runs as its own asyncio task. A task finishes with exactly
one outcome, either the payload bytes or a :class:`SoapError`, and the
awaiter waits for the expected number of payloads under one timeout.
Tasks still running when the awaiter gives up are cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from fritzcheck.device.base import SoapError, SoapTimeoutError, SoapTransport
from fritzcheck.device.models import SoapRequest

logger = logging.getLogger(__name__)


async def _perform(transport: SoapTransport, request: SoapRequest,
                   debug: bool) -> bytes:
    if debug:
        logger.debug("Calling %s on %s with %s", request.soap_action,
                     request.url, [(v.name, v.value) for v in request.variables])
    try:
        payload = await transport.call(request)
    except SoapError:
        raise
    except Exception as exc:
        raise SoapError(f"{request.action} failed: {exc}") from exc
    if debug:
        logger.debug("Response for %s:\n%s", request.action,
                     payload.decode("utf-8", errors="replace"))
    return payload


def dispatch(transport: SoapTransport, request: SoapRequest,
             debug: bool = False) -> asyncio.Task[bytes]:
    """Start *request* in the background and return the task carrying its outcome."""
    return asyncio.create_task(
        _perform(transport, request, debug), name=f"soap:{request.action}",
    )


async def _cancel(tasks: Sequence[asyncio.Task[bytes]]) -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
        logger.debug("Cancelled %d outstanding call(s)", len(pending))


async def await_responses(tasks: Sequence[asyncio.Task[bytes]], count: int,
                          timeout: float) -> list[bytes]:
    """Wait for *count* successful payloads from *tasks* within *timeout* seconds.

    Returns the payloads in dispatch order. Raises the first call error
    seen, or SoapTimeoutError if the payloads did not arrive in time.
    Nothing is retried.
    """
    if not 1 <= count <= len(tasks):
        raise ValueError(f"Expected {count} results from {len(tasks)} call(s)")

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    pending = set(tasks)
    succeeded: set[asyncio.Task[bytes]] = set()

    try:
        while pending and len(succeeded) < count:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            done, pending = await asyncio.wait(
                pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED,
            )
            if not done:
                break
            # Several calls may finish in one wake-up; report them in dispatch order.
            for task in tasks:
                if task not in done:
                    continue
                if task.cancelled():
                    raise SoapError(f"Call {task.get_name()} was cancelled")
                exc = task.exception()
                if exc is not None:
                    raise exc
                succeeded.add(task)
    except BaseException:
        await _cancel(tasks)
        raise

    if len(succeeded) < count:
        await _cancel(tasks)
        raise SoapTimeoutError(f"No response within {timeout:g} seconds")

    await _cancel(tasks)
    return [task.result() for task in tasks if task in succeeded][:count]
