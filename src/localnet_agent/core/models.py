from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

# attribute name -> JSON key
RECORD_FIELDS: dict[str, str] = {
    "ssid": "ssid",
    "ipv4": "ipv4",
    "subnet_mask": "subnetMask",
    "default_gateway": "defaultGateway",
    "dhcp_server": "dhcpServer",
    "dns_servers": "dnsServers",
    "connection_specific_dns_suffix": "connectionSpecificDnsSuffix",
    "dhcpv6_iaid": "dhcpv6Iaid",
    "dhcpv6_client_duid": "dhcpv6ClientDuid",
    "lease_obtained": "leaseObtained",
    "lease_expires": "leaseExpires",
}


@dataclass
class InterfaceRecord:
    interface: str
    ipv4: str
    subnet_mask: Optional[str]
    mac: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "interface": self.interface,
            "ipv4": self.ipv4,
            "subnetMask": self.subnet_mask,
            "mac": self.mac,
        }


@dataclass
class DerivedNetwork:
    subnet_mask: Optional[str] = None
    network_id: Optional[str] = None
    default_gateway: Optional[str] = None
    dhcp_server: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.subnet_mask, self.network_id, self.default_gateway, self.dhcp_server))


@dataclass
class NetworkRecord:
    timestamp: str
    client_ip: Optional[str] = None
    source: str = "command"
    estimated: bool = False
    ssid: Optional[str] = None
    ipv4: Optional[str] = None
    subnet_mask: Optional[str] = None
    default_gateway: Optional[str] = None
    dhcp_server: Optional[str] = None
    dns_servers: Optional[list[str]] = None
    connection_specific_dns_suffix: Optional[str] = None
    dhcpv6_iaid: Optional[str] = None
    dhcpv6_client_duid: Optional[str] = None
    lease_obtained: Optional[str] = None
    lease_expires: Optional[str] = None
    network_id: Optional[str] = None
    interfaces: Optional[list[InterfaceRecord]] = None
    client_hints: dict[str, str] = field(default_factory=dict)
    deployed_on: Optional[str] = None

    def update(self, values: dict[str, Any]) -> None:
        """Copy parsed values (keyed by attribute name) onto the record."""
        for name, value in values.items():
            if name in RECORD_FIELDS and value is not None:
                setattr(self, name, value)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "timestamp": self.timestamp,
            "clientIp": self.client_ip,
            "source": self.source,
            "estimated": self.estimated,
        }
        for name, key in RECORD_FIELDS.items():
            value = getattr(self, name)
            out[key] = list(value) if isinstance(value, list) else value
        if self.network_id is not None:
            out["networkId"] = self.network_id
        if self.interfaces is not None:
            out["interfaces"] = [iface.to_dict() for iface in self.interfaces]
        if self.client_hints:
            out["clientHints"] = dict(self.client_hints)
        if self.deployed_on:
            out["deployedOn"] = self.deployed_on
            out["isDeployed"] = True
            out["message"] = "Full network information is only available when running locally"
        return out
