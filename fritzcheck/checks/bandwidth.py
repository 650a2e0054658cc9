"""Link bandwidth checks: maximum rate, current rate and utilization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fritzcheck.checks.base import CheckContext, RateQuery, fetch_rate, first_of_history
from fritzcheck.checks.evaluate import Direction, build_result, evaluate
from fritzcheck.checks.models import CheckResult
from fritzcheck.checks.perfdata import PerformanceData
from fritzcheck.checks.thresholds import ThresholdError
from fritzcheck.device.base import SoapError
from fritzcheck.device.models import (
    WANCommonInterfaceCommonLinkPropertiesResponse,
    WANCommonInterfaceOnlineMonitorResponse,
    WANDSLInterfaceGetInfoResponse,
)

DSL_CONTROL_URL = "/upnp/control/wandslifconfig1"
DSL_SERVICE = "WANDSLInterfaceConfig"
COMMON_CONTROL_URL = "/upnp/control/wancommonifconfig1"
COMMON_SERVICE = "WANCommonInterfaceConfig"


@dataclass(frozen=True)
class LinkDirection:
    """Field selection for one traffic direction of the WAN link."""
    name: str     # used in status messages
    label: str    # perfdata label prefix
    dsl_max: Callable[[WANDSLInterfaceGetInfoResponse], str]
    common_max: Callable[[WANCommonInterfaceCommonLinkPropertiesResponse], str]
    current: Callable[[WANCommonInterfaceOnlineMonitorResponse], str]


DOWNSTREAM = LinkDirection(
    name="Downstream",
    label="downstream",
    dsl_max=lambda r: r.new_downstream_curr_rate,
    common_max=lambda r: r.new_layer1_downstream_max_bit_rate,
    current=lambda r: first_of_history(r.new_ds_current_bps),
)

UPSTREAM = LinkDirection(
    name="Upstream",
    label="upstream",
    dsl_max=lambda r: r.new_upstream_curr_rate,
    common_max=lambda r: r.new_layer1_upstream_max_bit_rate,
    current=lambda r: first_of_history(r.new_us_current_bps),
)


# ── Rate queries ────────────────────────────────────────────────────

def max_rate_query(context: CheckContext, link: LinkDirection) -> RateQuery:
    divisor = context.probe.divisor_max
    if context.probe.is_dsl:
        return RateQuery(
            request=context.request(DSL_CONTROL_URL, DSL_SERVICE, "GetInfo"),
            response_type=WANDSLInterfaceGetInfoResponse,
            extract=link.dsl_max,
            convert=lambda rate: rate / divisor,
            field_name=f"maximum {link.label}",
        )
    return RateQuery(
        request=context.request(COMMON_CONTROL_URL, COMMON_SERVICE,
                                "GetCommonLinkProperties"),
        response_type=WANCommonInterfaceCommonLinkPropertiesResponse,
        extract=link.common_max,
        convert=lambda rate: rate / divisor,
        field_name=f"maximum {link.label}",
    )


def current_rate_query(context: CheckContext, link: LinkDirection) -> RateQuery:
    divisor = context.probe.divisor_current
    request = context.request(
        COMMON_CONTROL_URL, COMMON_SERVICE, "X_AVM-DE_GetOnlineMonitor",
    ).with_variable("NewSyncGroupIndex", "0")
    return RateQuery(
        request=request,
        response_type=WANCommonInterfaceOnlineMonitorResponse,
        extract=link.current,
        convert=lambda rate: rate * 8 / divisor,  # byte/s -> bit/s
        field_name=f"current {link.label}",
    )


def _evaluated(context: CheckContext, perfdata: PerformanceData,
               direction: Direction, message: str, fallback: str) -> CheckResult:
    try:
        severity = evaluate(perfdata, context.probe.warning,
                            context.probe.critical, direction)
    except ThresholdError as exc:
        return CheckResult.unknown(str(exc))
    return build_result(severity, message, perfdata, fallback)


# ── Checks ──────────────────────────────────────────────────────────

async def check_max(context: CheckContext, link: LinkDirection) -> CheckResult:
    """Maximum rate of the link; alerts when it falls below the thresholds."""
    try:
        value = await fetch_rate(context, max_rate_query(context, link))
    except SoapError as exc:
        return CheckResult.unknown(str(exc))

    perfdata = PerformanceData(f"{link.label}_max", value)
    return _evaluated(
        context, perfdata, Direction.BELOW,
        f"Max {link.name}: {value:.2f} Mbit/s",
        f"Not able to calculate maximum {link.label}",
    )


async def check_current(context: CheckContext, link: LinkDirection) -> CheckResult:
    """Current rate of the link; alerts when it exceeds the thresholds."""
    try:
        value = await fetch_rate(context, current_rate_query(context, link))
    except SoapError as exc:
        return CheckResult.unknown(str(exc))

    perfdata = PerformanceData(f"{link.label}_current", value)
    return _evaluated(
        context, perfdata, Direction.ABOVE,
        f"Current {link.name}: {value:.2f} Mbit/s",
        f"Not able to calculate current {link.label}",
    )


async def check_usage(context: CheckContext, link: LinkDirection) -> CheckResult:
    """Utilization in percent of the maximum rate.

    The current rate is fetched and decoded before the maximum is requested,
    the two calls never overlap.
    """
    try:
        current = await fetch_rate(context, current_rate_query(context, link))
        maximum = await fetch_rate(context, max_rate_query(context, link))
    except SoapError as exc:
        return CheckResult.unknown(str(exc))

    if maximum == 0:
        return CheckResult.unknown(f"Maximum {link.name} is 0")

    usage = 100 / maximum * current
    perfdata = PerformanceData(f"{link.label}_usage", usage,
                               minimum=0.0, maximum=100.0)
    return _evaluated(
        context, perfdata, Direction.ABOVE,
        f"{usage:.2f}% {link.name} utilization "
        f"({current:.2f} Mbit/s of {maximum:.2f} Mbits)",
        f"Not able to calculate {link.label} utilization",
    )


async def check_downstream_max(context: CheckContext) -> CheckResult:
    return await check_max(context, DOWNSTREAM)


async def check_downstream_current(context: CheckContext) -> CheckResult:
    return await check_current(context, DOWNSTREAM)


async def check_downstream_usage(context: CheckContext) -> CheckResult:
    return await check_usage(context, DOWNSTREAM)


async def check_upstream_max(context: CheckContext) -> CheckResult:
    return await check_max(context, UPSTREAM)


async def check_upstream_current(context: CheckContext) -> CheckResult:
    return await check_current(context, UPSTREAM)


async def check_upstream_usage(context: CheckContext) -> CheckResult:
    return await check_usage(context, UPSTREAM)
