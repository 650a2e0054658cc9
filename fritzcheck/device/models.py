"""TR-064 request and response data models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import ClassVar


@dataclass(frozen=True)
class SoapVariable:
    name: str
    value: str


@dataclass(frozen=True)
class Connection:
    host: str
    port: int = 49443
    username: str = "dslf-config"
    password: str | None = field(default=None, repr=False)
    scheme: str = "https"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


@dataclass(frozen=True)
class SoapRequest:
    """One TR-064 action call against a control URL.

    Frozen: use :meth:`with_variable` to derive a request with an extra
    argument.
    """
    connection: Connection
    control_url: str
    service: str
    action: str
    variables: tuple[SoapVariable, ...] = ()

    @property
    def service_type(self) -> str:
        return f"urn:dslforum-org:service:{self.service}:1"

    @property
    def soap_action(self) -> str:
        return f"{self.service_type}#{self.action}"

    @property
    def url(self) -> str:
        return self.connection.base_url + self.control_url

    def with_variable(self, name: str, value: str) -> SoapRequest:
        return replace(self, variables=self.variables + (SoapVariable(name, value),))


# ── Decoded responses ───────────────────────────────────────────────
#
# FIELDS maps attribute name -> XML element name inside <u:ActionResponse>.
# Every field is kept as the raw string the router sent.

@dataclass
class SoapResponse:
    ACTION: ClassVar[str] = ""
    FIELDS: ClassVar[dict[str, str]] = {}


@dataclass
class WANDSLInterfaceGetInfoResponse(SoapResponse):
    ACTION: ClassVar[str] = "GetInfo"
    FIELDS: ClassVar[dict[str, str]] = {
        "new_downstream_curr_rate": "NewDownstreamCurrRate",
        "new_upstream_curr_rate": "NewUpstreamCurrRate",
    }

    new_downstream_curr_rate: str = ""
    new_upstream_curr_rate: str = ""


@dataclass
class WANCommonInterfaceCommonLinkPropertiesResponse(SoapResponse):
    ACTION: ClassVar[str] = "GetCommonLinkProperties"
    FIELDS: ClassVar[dict[str, str]] = {
        "new_layer1_downstream_max_bit_rate": "NewLayer1DownstreamMaxBitRate",
        "new_layer1_upstream_max_bit_rate": "NewLayer1UpstreamMaxBitRate",
        "new_wan_access_type": "NewWANAccessType",
        "new_physical_link_status": "NewPhysicalLinkStatus",
    }

    new_layer1_downstream_max_bit_rate: str = ""
    new_layer1_upstream_max_bit_rate: str = ""
    new_wan_access_type: str = ""
    new_physical_link_status: str = ""


@dataclass
class WANCommonInterfaceOnlineMonitorResponse(SoapResponse):
    ACTION: ClassVar[str] = "X_AVM-DE_GetOnlineMonitor"
    FIELDS: ClassVar[dict[str, str]] = {
        "new_ds_current_bps": "Newds_current_bps",
        "new_us_current_bps": "Newus_current_bps",
    }

    new_ds_current_bps: str = ""  # comma-separated history, newest first
    new_us_current_bps: str = ""
