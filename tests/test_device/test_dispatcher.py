"""Tests for call dispatch and response collection."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeTransport, dsl_info, online_monitor
from fritzcheck.device.base import SoapError, SoapTimeoutError
from fritzcheck.device.dispatcher import await_responses, dispatch
from fritzcheck.device.models import SoapRequest


def _request(connection, action: str) -> SoapRequest:
    return SoapRequest(connection=connection, control_url="/upnp/control/x",
                       service="WANCommonInterfaceConfig", action=action)


@pytest.mark.asyncio
async def test_single_result(connection):
    transport = FakeTransport({"GetInfo": dsl_info()})
    task = dispatch(transport, _request(connection, "GetInfo"))

    payloads = await await_responses([task], 1, timeout=1)

    assert payloads == [dsl_info()]
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_results_in_dispatch_order(connection):
    transport = FakeTransport({"A": b"first", "B": b"second"})
    tasks = [
        dispatch(transport, _request(connection, "A")),
        dispatch(transport, _request(connection, "B")),
    ]
    assert await await_responses(tasks, 2, timeout=1) == [b"first", b"second"]


@pytest.mark.asyncio
async def test_error_is_propagated(connection):
    transport = FakeTransport({"GetInfo": SoapError("HTTP 500")})
    task = dispatch(transport, _request(connection, "GetInfo"))

    with pytest.raises(SoapError, match="HTTP 500"):
        await await_responses([task], 1, timeout=1)


@pytest.mark.asyncio
async def test_unexpected_exception_is_wrapped(connection):
    transport = FakeTransport({"GetInfo": RuntimeError("boom")})
    task = dispatch(transport, _request(connection, "GetInfo"))

    with pytest.raises(SoapError, match="GetInfo failed: boom") as info:
        await await_responses([task], 1, timeout=1)
    assert not isinstance(info.value, SoapTimeoutError)


@pytest.mark.asyncio
async def test_timeout_raises_and_cancels(connection):
    transport = FakeTransport({"GetInfo": "hang"})
    task = dispatch(transport, _request(connection, "GetInfo"))

    with pytest.raises(SoapTimeoutError, match="No response within 0.05 seconds"):
        await await_responses([task], 1, timeout=0.05)

    assert task.cancelled()
    assert transport.cancelled == ["GetInfo"]


@pytest.mark.asyncio
async def test_error_cancels_remaining_calls(connection):
    transport = FakeTransport({"A": SoapError("refused"), "B": "hang"})
    tasks = [
        dispatch(transport, _request(connection, "A")),
        dispatch(transport, _request(connection, "B")),
    ]

    with pytest.raises(SoapError, match="refused"):
        await await_responses(tasks, 2, timeout=1)

    assert tasks[1].cancelled()
    assert transport.cancelled == ["B"]


@pytest.mark.asyncio
async def test_partial_results_time_out(connection):
    transport = FakeTransport({"A": online_monitor(), "B": "hang"})
    tasks = [
        dispatch(transport, _request(connection, "A")),
        dispatch(transport, _request(connection, "B")),
    ]

    with pytest.raises(SoapTimeoutError):
        await await_responses(tasks, 2, timeout=0.05)
    assert transport.cancelled == ["B"]


@pytest.mark.asyncio
async def test_count_larger_than_calls_rejected(connection):
    transport = FakeTransport({"A": b"ok"})
    task = dispatch(transport, _request(connection, "A"))
    with pytest.raises(ValueError):
        await await_responses([task], 2, timeout=1)
    await task


@pytest.mark.asyncio
async def test_debug_tracing_logs_payload(connection, caplog):
    transport = FakeTransport({"GetInfo": b"<payload/>"})
    with caplog.at_level("DEBUG", logger="fritzcheck.device.dispatcher"):
        task = dispatch(transport, _request(connection, "GetInfo"), debug=True)
        await await_responses([task], 1, timeout=1)

    assert "GetInfo" in caplog.text
    assert "<payload/>" in caplog.text


@pytest.mark.asyncio
async def test_awaiter_cancellation_cancels_calls(connection):
    transport = FakeTransport({"GetInfo": "hang"})
    task = dispatch(transport, _request(connection, "GetInfo"))
    waiter = asyncio.create_task(await_responses([task], 1, timeout=10))
    await asyncio.sleep(0.01)

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter
    assert task.cancelled()
