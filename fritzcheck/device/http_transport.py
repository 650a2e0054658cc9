"""httpx transport for TR-064 SOAP calls."""

from __future__ import annotations

import logging
from xml.etree import ElementTree as ET

import httpx

from fritzcheck.device.base import SoapError, SoapTransport
from fritzcheck.device.decoder import describe_fault, xml_find
from fritzcheck.device.envelope import build_envelope, build_headers
from fritzcheck.device.models import Connection, SoapRequest

logger = logging.getLogger(__name__)


class HttpxTransport(SoapTransport):
    """TR-064 transport over HTTP(S) with digest authentication.

    FRITZ!Box routers serve TR-064 with a self-signed certificate, so TLS
    verification is off unless ``verify_tls`` is set. ``timeout`` bounds each
    HTTP request in seconds; ``None`` leaves the bound to the caller.
    """

    def __init__(self, connection: Connection, verify_tls: bool = False,
                 timeout: float | None = None,
                 client: httpx.AsyncClient | None = None):
        self.connection = connection
        self.verify_tls = verify_tls
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            auth = None
            if self.connection.password is not None:
                auth = httpx.DigestAuth(self.connection.username,
                                        self.connection.password)
            self._client = httpx.AsyncClient(
                auth=auth, verify=self.verify_tls, timeout=self.timeout,
            )
        return self._client

    async def call(self, request: SoapRequest) -> bytes:
        client = self._get_client()
        body = build_envelope(request)
        logger.debug("POST %s (%s)", request.url, request.soap_action)

        try:
            response = await client.post(
                request.url, content=body, headers=build_headers(request),
            )
        except httpx.HTTPError as exc:
            reason = str(exc) or type(exc).__name__
            raise SoapError(f"Request to {request.url} failed: {reason}") from exc

        if response.status_code == 401:
            raise SoapError("Authentication failed (HTTP 401)")
        if not response.is_success:
            raise SoapError(self._describe_failure(response))
        return response.content

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _describe_failure(response: httpx.Response) -> str:
        """Describe a non-2xx response, using the UPnP fault when the body has one."""
        message = f"HTTP {response.status_code}"
        try:
            root = ET.fromstring(response.content)
        except ET.ParseError:
            return message
        fault = xml_find(root, "Fault")
        if fault is None:
            return message
        return f"{message}: {describe_fault(fault)}"
