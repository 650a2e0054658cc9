"""Abstract SOAP transport interface and call errors."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fritzcheck.device.models import SoapRequest


class SoapError(Exception):
    """A TR-064 call failed: transport, HTTP status, or payload."""


class SoapTimeoutError(SoapError):
    """No response arrived within the configured timeout."""


class DecodeError(SoapError):
    """A response payload or one of its fields could not be decoded."""


class SoapTransport(ABC):
    """Base class for anything that can carry a SOAP request to the router."""

    @abstractmethod
    async def call(self, request: SoapRequest) -> bytes:
        """Send one request and return the raw response body."""

    async def close(self) -> None:
        """Release transport resources."""

    async def __aenter__(self) -> SoapTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def transport_name(self) -> str:
        return self.__class__.__name__
