"""Response decoding: SOAP payload bytes to typed response dataclasses."""

from __future__ import annotations

import logging
import math
from typing import Any, TypeVar
from xml.etree import ElementTree as ET

from fritzcheck.device.base import DecodeError
from fritzcheck.device.models import SoapResponse

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=SoapResponse)


# ── XML helpers (TR-064 responses mix default and prefixed namespaces) ──

def xml_find(element: Any, tag: str) -> Any:
    """Find the first descendant element by tag name, ignoring namespaces."""
    return element.find(f".//{{*}}{tag}")


def xml_findtext(element: Any, tag: str, default: str = "") -> str:
    """Find text content of first matching descendant, ignoring namespaces."""
    text = element.findtext(f".//{{*}}{tag}")
    return text.strip() if text is not None else default


def parse_payload(payload: bytes) -> ET.Element:
    """Parse a raw SOAP payload, raising DecodeError on faults or bad XML."""
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as exc:
        raise DecodeError(f"Malformed SOAP response: {exc}") from exc

    fault = xml_find(root, "Fault")
    if fault is not None:
        raise DecodeError(describe_fault(fault))
    return root


def describe_fault(fault: Any) -> str:
    """Build a readable message from a SOAP fault, preferring the UPnP detail."""
    code = xml_findtext(fault, "errorCode")
    description = xml_findtext(fault, "errorDescription")
    if code or description:
        return f"UPnP error {code or '?'}: {description or 'no description'}"
    faultstring = xml_findtext(fault, "faultstring")
    return f"SOAP fault: {faultstring or 'unknown fault'}"


def decode_response(payload: bytes, response_type: type[R]) -> R:
    """Unmarshal *payload* into *response_type*.

    Elements that are absent from the response decode to the empty string.
    """
    root = parse_payload(payload)
    container = xml_find(root, f"{response_type.ACTION}Response")
    if container is None:
        raise DecodeError(
            f"Response does not contain {response_type.ACTION}Response"
        )

    values = {
        attr: xml_findtext(container, tag)
        for attr, tag in response_type.FIELDS.items()
    }
    logger.debug("Decoded %s: %s", response_type.__name__, values)
    return response_type(**values)


def parse_rate(raw: str, field_name: str = "rate") -> float:
    """Parse a numeric string reported by the router into a float."""
    try:
        value = float(raw)
    except ValueError:
        raise DecodeError(
            f"Unable to parse {field_name} value {raw!r} as a number"
        ) from None
    if not math.isfinite(value):
        raise DecodeError(f"{field_name} value {raw!r} is not a finite number")
    return value
