from __future__ import annotations

import re

from .models import DerivedNetwork

_IPV4_RE = re.compile(r"[0-9]{1,3}(?:\.[0-9]{1,3}){3}")

CLASS_C_MASK = "255.255.255.0"
CLASS_A_MASK = "255.0.0.0"
CLASS_B_PRIVATE_MASK = "255.240.0.0"


def is_valid_ipv4(value: str | None) -> bool:
    if not isinstance(value, str) or not _IPV4_RE.fullmatch(value):
        return False
    return all(0 <= int(part) <= 255 for part in value.split("."))


def guess_subnet_mask(ip: str) -> str:
    octets = [int(part) for part in ip.split(".")]
    if octets[0] == 10:
        return CLASS_A_MASK
    if octets[0] == 172 and 16 <= octets[1] <= 31:
        return CLASS_B_PRIVATE_MASK
    return CLASS_C_MASK


def derive_network(
    ip: str,
    dhcp_server: str | None = None,
    dhcp_defaults_to_gateway: bool = True,
) -> DerivedNetwork:
    """Estimate mask, network id and gateway from a validated IPv4 address.

    This is a display-grade guess based on the private address ranges, not a
    measurement. The gateway is assumed to be the first host of the /24 the
    address sits in. ``dhcp_server`` wins when given; otherwise the DHCP
    server is reported as the gateway only when ``dhcp_defaults_to_gateway``
    is set.
    """
    network_id = ".".join(ip.split(".")[:3])
    gateway = f"{network_id}.1"
    if dhcp_server is None and dhcp_defaults_to_gateway:
        dhcp_server = gateway
    return DerivedNetwork(
        subnet_mask=guess_subnet_mask(ip),
        network_id=network_id,
        default_gateway=gateway,
        dhcp_server=dhcp_server,
    )


def derive_from_client_ip(
    ip: str | None,
    dhcp_server: str | None = None,
    dhcp_defaults_to_gateway: bool = True,
) -> DerivedNetwork:
    # Malformed input gets an empty result, not an error.
    if not is_valid_ipv4(ip):
        return DerivedNetwork()
    if dhcp_server is not None and not is_valid_ipv4(dhcp_server):
        dhcp_server = None
    return derive_network(ip, dhcp_server=dhcp_server, dhcp_defaults_to_gateway=dhcp_defaults_to_gateway)
