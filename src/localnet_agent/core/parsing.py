from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

_QUAD = r"([0-9]{1,3}(?:\.[0-9]{1,3}){3})(?![0-9])"
# An IPv6 gateway may sit on the label line with the IPv4 one on the next.
_IPV6_PREFIX = r"(?:[0-9a-f]*:[0-9a-f:%.]*\s+)?"
_DIGITS = "0123456789"


@dataclass(frozen=True)
class IpconfigLabels:
    """Label text as printed by ``ipconfig /all`` and ``netsh wlan show interfaces``.

    Pass a different instance to parse output from a localized Windows install.
    """

    ipv4: str = "IPv4 Address"
    subnet_mask: str = "Subnet Mask"
    default_gateway: str = "Default Gateway"
    dhcp_server: str = "DHCP Server"
    dns_servers: str = "DNS Servers"
    dns_suffix: str = "Connection-specific DNS Suffix"
    lease_obtained: str = "Lease Obtained"
    lease_expires: str = "Lease Expires"
    dhcpv6_iaid: str = "DHCPv6 IAID"
    dhcpv6_client_duid: str = "DHCPv6 Client DUID"
    ssid: str = "SSID"


DEFAULT_LABELS = IpconfigLabels()


def _quad_re(label: str) -> re.Pattern[str]:
    return re.compile(re.escape(label) + r"[\s.:]*" + _IPV6_PREFIX + _QUAD, re.IGNORECASE)


def _line_re(label: str, value: str = r"([^\r\n]*)") -> re.Pattern[str]:
    return re.compile(re.escape(label) + r"[ \t.]*:[ \t]*" + value, re.IGNORECASE)


def extract_address(text: str, label: str) -> Optional[str]:
    """First dotted-quad following ``label``; suffixes like ``(Preferred)`` are dropped."""
    m = _quad_re(label).search(text or "")
    if m:
        return m.group(1)
    return None


def extract_text(text: str, label: str) -> Optional[str]:
    for m in _line_re(label).finditer(text or ""):
        value = m.group(1).strip()
        if value:
            return value
    return None


def extract_integer(text: str, label: str) -> Optional[str]:
    m = _line_re(label, r"([0-9]+)").search(text or "")
    if m:
        return m.group(1)
    return None


def extract_dns_servers(text: str, label: str = DEFAULT_LABELS.dns_servers) -> Optional[list[str]]:
    """DNS entries: the labelled first value plus the indented digit-led lines below it."""
    text = text or ""
    m = _line_re(label, r"(\S+)[^\r\n]*").search(text)
    if not m:
        return None

    servers = [m.group(1)]
    for line in text[m.end():].splitlines()[1:]:
        entry = line.strip()
        if not entry or entry[0] not in _DIGITS:
            break
        servers.append(entry)
    return servers


def parse_ssid(text: str, labels: IpconfigLabels = DEFAULT_LABELS) -> Optional[str]:
    # "BSSID" lines never match because the label must start the line.
    pattern = re.compile(
        r"^[ \t]*" + re.escape(labels.ssid) + r"[ \t]*:(.+)$",
        re.IGNORECASE | re.MULTILINE,
    )
    for m in pattern.finditer(text or ""):
        value = m.group(1).strip()
        if value:
            return value
    return None


def split_adapters(text: str) -> dict[str, str]:
    """Split ``ipconfig /all`` output into ``{adapter header: section body}``.

    Headers are the unindented lines ending in a colon, for example
    ``Wireless LAN adapter Wi-Fi:``. The global block before the first
    adapter is not returned.
    """
    sections: dict[str, list[str]] = {}
    current: list[str] | None = None
    for line in (text or "").splitlines():
        stripped = line.rstrip()
        if stripped and not line[0].isspace() and stripped.endswith(":"):
            current = sections.setdefault(stripped[:-1].strip(), [])
            continue
        if current is not None:
            current.append(line)
    return {header: "\n".join(lines) for header, lines in sections.items()}


def select_adapter(text: str, adapter: str) -> Optional[str]:
    needle = adapter.strip().lower()
    for header, body in split_adapters(text).items():
        if needle in header.lower():
            return body
    return None


def parse_ipconfig(
    text: str,
    labels: IpconfigLabels = DEFAULT_LABELS,
    adapter: str | None = None,
) -> dict[str, Any]:
    """Extract the ipconfig fields that are present, keyed by record attribute name."""
    if adapter:
        text = select_adapter(text, adapter) or ""

    found: dict[str, Any] = {
        "ipv4": extract_address(text, labels.ipv4),
        "subnet_mask": extract_address(text, labels.subnet_mask),
        "default_gateway": extract_address(text, labels.default_gateway),
        "dhcp_server": extract_address(text, labels.dhcp_server),
        "dns_servers": extract_dns_servers(text, labels.dns_servers),
        "connection_specific_dns_suffix": extract_text(text, labels.dns_suffix),
        "lease_obtained": extract_text(text, labels.lease_obtained),
        "lease_expires": extract_text(text, labels.lease_expires),
        "dhcpv6_iaid": extract_integer(text, labels.dhcpv6_iaid),
        "dhcpv6_client_duid": extract_text(text, labels.dhcpv6_client_duid),
    }
    return {name: value for name, value in found.items() if value is not None}


def parse_network_output(
    wlan_text: str,
    ipconfig_text: str,
    labels: IpconfigLabels = DEFAULT_LABELS,
    adapter: str | None = None,
) -> dict[str, Any]:
    result: dict[str, Any] = {"ssid": parse_ssid(wlan_text, labels)}
    result.update(parse_ipconfig(ipconfig_text, labels, adapter=adapter))
    return result
