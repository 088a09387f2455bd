from __future__ import annotations

import pytest

from localnet_agent.config import Settings
from localnet_agent.core.commands import IPCONFIG_COMMAND, WLAN_COMMAND, CommandResult

IPCONFIG_ALL = """
Windows IP Configuration

   Host Name . . . . . . . . . . . . : DESKTOP-7QK2L0M
   Primary Dns Suffix  . . . . . . . :
   Node Type . . . . . . . . . . . . : Hybrid
   IP Routing Enabled. . . . . . . . : No
   WINS Proxy Enabled. . . . . . . . : No
   DNS Suffix Search List. . . . . . : home

Ethernet adapter Ethernet:

   Media State . . . . . . . . . . . : Media disconnected
   Connection-specific DNS Suffix  . :
   Description . . . . . . . . . . . : Realtek PCIe GbE Family Controller
   Physical Address. . . . . . . . . : 00-D8-61-AA-BB-CC
   DHCP Enabled. . . . . . . . . . . : Yes
   Autoconfiguration Enabled . . . . : Yes

Wireless LAN adapter Wi-Fi:

   Connection-specific DNS Suffix  . : home
   Description . . . . . . . . . . . : Intel(R) Wi-Fi 6 AX201 160MHz
   Physical Address. . . . . . . . . : 3C-58-C2-11-22-33
   DHCP Enabled. . . . . . . . . . . : Yes
   Autoconfiguration Enabled . . . . : Yes
   Link-local IPv6 Address . . . . . : fe80::1c2d:3e4f:5a6b:7c8d%12(Preferred)
   IPv4 Address. . . . . . . . . . . : 192.168.1.50(Preferred)
   Subnet Mask . . . . . . . . . . . : 255.255.255.0
   Lease Obtained. . . . . . . . . . : Monday, March 4, 2024 9:15:02 AM
   Lease Expires . . . . . . . . . . : Tuesday, March 5, 2024 9:15:01 AM
   Default Gateway . . . . . . . . . : fe80::1%12
                                       192.168.1.1
   DHCP Server . . . . . . . . . . . : 192.168.1.1
   DHCPv6 IAID . . . . . . . . . . . : 104618178
   DHCPv6 Client DUID. . . . . . . . : 00-01-00-01-2A-BC-DE-F0-3C-58-C2-11-22-33
   DNS Servers . . . . . . . . . . . : 8.8.8.8
                                       8.8.4.4
   NetBIOS over Tcpip. . . . . . . . : Enabled

Ethernet adapter vEthernet (WSL):

   Connection-specific DNS Suffix  . :
   Description . . . . . . . . . . . : Hyper-V Virtual Ethernet Adapter
   Link-local IPv6 Address . . . . . : fe80::aaaa:bbbb:cccc:dddd%40(Preferred)
   IPv4 Address. . . . . . . . . . . : 172.20.160.1(Preferred)
   Subnet Mask . . . . . . . . . . . : 255.255.240.0
   Default Gateway . . . . . . . . . :
   DHCPv6 IAID . . . . . . . . . . . : 671094109
   DNS Servers . . . . . . . . . . . : fec0:0:0:ffff::1%1
                                       fec0:0:0:ffff::2%1
   NetBIOS over Tcpip. . . . . . . . : Enabled
"""

NETSH_WLAN = """
There is 1 interface on the system:

    Name                   : Wi-Fi
    Description            : Intel(R) Wi-Fi 6 AX201 160MHz
    GUID                   : 5f1e2d3c-4b5a-6978-8796-a5b4c3d2e1f0
    Physical address       : 3c:58:c2:11:22:33
    State                  : connected
    SSID                   : HomeNetwork 5G
    BSSID                  : aa:bb:cc:dd:ee:ff
    Network type           : Infrastructure
    Radio type             : 802.11ax
    Authentication         : WPA2-Personal
    Channel                : 36
    Signal                 : 92%

    Hosted network status  : Not available
"""


class FakeRunner:
    """Returns canned output per command; ``None`` means the command failed."""

    available = True

    def __init__(self, outputs: dict) -> None:
        self.outputs = outputs
        self.calls: list[tuple[str, ...]] = []

    def run(self, args, timeout):
        argv = tuple(args)
        self.calls.append(argv)
        result = self.outputs.get(argv)
        if isinstance(result, CommandResult):
            return result
        if result is None:
            return CommandResult(args=argv, error=f"{argv[0]} is not recognized")
        return CommandResult(args=argv, stdout=result, ok=True)


@pytest.fixture
def ipconfig_all() -> str:
    return IPCONFIG_ALL


@pytest.fixture
def netsh_wlan() -> str:
    return NETSH_WLAN


@pytest.fixture
def settings() -> Settings:
    return Settings(include_interfaces=False)


@pytest.fixture
def windows_runner() -> FakeRunner:
    return FakeRunner({WLAN_COMMAND: NETSH_WLAN, IPCONFIG_COMMAND: IPCONFIG_ALL})


@pytest.fixture
def make_runner():
    def _make(wlan=None, ipconfig=None) -> FakeRunner:
        return FakeRunner({WLAN_COMMAND: wlan, IPCONFIG_COMMAND: ipconfig})

    return _make
