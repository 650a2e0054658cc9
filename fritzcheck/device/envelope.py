"""SOAP 1.1 envelope construction for TR-064 actions."""

from __future__ import annotations

from xml.etree import ElementTree as ET

from fritzcheck.device.models import SoapRequest

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP_ENCODING = "http://schemas.xmlsoap.org/soap/encoding/"

CONTENT_TYPE = 'text/xml; charset="utf-8"'


def build_envelope(request: SoapRequest) -> bytes:
    """Serialise *request* into a SOAP envelope body.

    The action element lives in the service namespace, its arguments are
    unqualified children in the order they were added to the request.
    Prefixes are declared on the elements themselves; ElementTree's global
    namespace map is left untouched.
    """
    envelope = ET.Element("s:Envelope", {
        "xmlns:s": SOAP_ENV_NS,
        "s:encodingStyle": SOAP_ENCODING,
    })
    body = ET.SubElement(envelope, "s:Body")
    action = ET.SubElement(body, f"u:{request.action}",
                           {"xmlns:u": request.service_type})
    for variable in request.variables:
        ET.SubElement(action, variable.name).text = variable.value

    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


def build_headers(request: SoapRequest) -> dict[str, str]:
    return {
        "Content-Type": CONTENT_TYPE,
        "SOAPAction": request.soap_action,
    }
