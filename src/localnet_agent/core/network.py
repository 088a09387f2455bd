from __future__ import annotations

import socket
from typing import Optional

import psutil

from .models import InterfaceRecord

_MAPPED_PREFIX = "::ffff:"


def _mac_for(addrs) -> Optional[str]:
    mac = next((a for a in addrs if a.family == psutil.AF_LINK), None)
    if not mac or not mac.address:
        return None
    return mac.address.lower().replace("-", ":")


def list_interfaces() -> list[InterfaceRecord]:
    """Non-loopback IPv4 addresses of this host."""
    interfaces: list[InterfaceRecord] = []
    for iface_name, addrs in psutil.net_if_addrs().items():
        mac = _mac_for(addrs)
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            if not addr.address or addr.address.startswith("127."):
                continue
            interfaces.append(
                InterfaceRecord(
                    interface=iface_name,
                    ipv4=addr.address,
                    subnet_mask=addr.netmask,
                    mac=mac,
                )
            )
    return interfaces


def normalize_client_ip(value: str | None) -> str | None:
    if not value:
        return None
    # X-Forwarded-For: client, proxy1, proxy2
    ip = value.split(",", 1)[0].strip()
    if ip.lower().startswith(_MAPPED_PREFIX):
        ip = ip[len(_MAPPED_PREFIX):]
    return ip or None
