from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from localnet_agent.config import Settings

from .commands import CommandRunner, capture_network_output
from .derive import derive_from_client_ip
from .models import InterfaceRecord, NetworkRecord
from .network import list_interfaces, normalize_client_ip
from .parsing import DEFAULT_LABELS, IpconfigLabels, parse_network_output, parse_ssid
from .storage import RecordStore

logger = logging.getLogger(__name__)

HINT_HEADERS = ("X-Client-IP", "X-Network-SSID", "X-Network-Type", "X-DHCP-Server")


class CommandFailedError(RuntimeError):
    """The IP configuration command could not be executed."""


class NoNetworkDataError(LookupError):
    """Nothing usable could be extracted for the request."""


@dataclass
class RequestMeta:
    client_ip: Optional[str] = None
    private_ip: Optional[str] = None
    dhcp_server: Optional[str] = None
    adapter: Optional[str] = None
    hints: dict[str, str] = field(default_factory=dict)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _has_adapter_data(parsed: dict[str, Any]) -> bool:
    return any(value for name, value in parsed.items() if name != "ssid")


class NetworkCollector:
    def __init__(
        self,
        settings: Settings,
        runner: CommandRunner,
        store: RecordStore | None = None,
        labels: IpconfigLabels = DEFAULT_LABELS,
        interface_source: Callable[[], list[InterfaceRecord]] = list_interfaces,
    ) -> None:
        self.settings = settings
        self.runner = runner
        self.store = store
        self.labels = labels
        self.interface_source = interface_source

    def _new_record(self, meta: RequestMeta, source: str) -> NetworkRecord:
        record = NetworkRecord(
            timestamp=utc_timestamp(),
            client_ip=meta.client_ip,
            source=source,
            client_hints=dict(meta.hints),
            deployed_on=self.settings.deployed_on,
        )
        if self.settings.include_interfaces and not self.settings.deployed_on:
            record.interfaces = self.interface_source()
        return record

    def _save(self, record: NetworkRecord) -> NetworkRecord:
        if self.store is None:
            return record
        try:
            self.store.save(record)
        except sqlite3.Error:
            logger.exception("could not store network record")
        return record

    def collect(self, meta: RequestMeta) -> NetworkRecord:
        if self.runner.available:
            return self.from_commands(meta)
        return self.derived(meta)

    def from_commands(self, meta: RequestMeta) -> NetworkRecord:
        captured = capture_network_output(self.runner, self.settings.command_timeout_s)

        wlan_text = captured.wlan.stdout if captured.wlan.ok else ""
        if not captured.wlan.ok:
            logger.warning("WiFi report unavailable, continuing without SSID: %s", captured.wlan.error)

        ipconfig = captured.ipconfig
        if ipconfig.timed_out:
            logger.warning("ipconfig unavailable (%s), falling back to derived values", ipconfig.error)
            return self.derived(meta, ssid=parse_ssid(wlan_text, self.labels))
        if not ipconfig.ok:
            raise CommandFailedError(ipconfig.error or "ipconfig failed")

        parsed = parse_network_output(wlan_text, ipconfig.stdout, self.labels, adapter=meta.adapter)
        if not _has_adapter_data(parsed):
            raise NoNetworkDataError("No network adapter data found in ipconfig output")

        record = self._new_record(meta, "command")
        record.update(parsed)
        logger.info("collected network data from commands for %s", meta.client_ip or "unknown client")
        return self._save(record)

    def from_submitted(self, ipconfig_text: str, wlan_text: str, meta: RequestMeta) -> NetworkRecord:
        parsed = parse_network_output(wlan_text, ipconfig_text, self.labels, adapter=meta.adapter)
        if not _has_adapter_data(parsed):
            raise NoNetworkDataError("No network adapter data found in submitted output")

        record = self._new_record(meta, "submitted")
        record.update(parsed)
        logger.info("parsed submitted network output from %s", meta.client_ip or "unknown client")
        return self._save(record)

    def derived(self, meta: RequestMeta, ssid: str | None = None) -> NetworkRecord:
        """Estimated record built from the caller's address when no command output exists.

        Always answers: an unusable address leaves the network fields empty.
        """
        ip = normalize_client_ip(meta.private_ip or meta.hints.get("X-Client-IP") or meta.client_ip)
        dhcp_server = meta.dhcp_server or meta.hints.get("X-DHCP-Server")
        network = derive_from_client_ip(
            ip,
            dhcp_server=dhcp_server,
            dhcp_defaults_to_gateway=self.settings.dhcp_defaults_to_gateway,
        )

        record = self._new_record(meta, "derived")
        record.estimated = True
        record.ssid = ssid or meta.hints.get("X-Network-SSID") or None
        if not network.is_empty():
            record.ipv4 = ip
            record.subnet_mask = network.subnet_mask
            record.network_id = network.network_id
            record.default_gateway = network.default_gateway
            record.dhcp_server = network.dhcp_server
            logger.info("derived network data for %s", ip)
        else:
            logger.info("no IPv4 client address to derive from (%s)", ip or "none")
        return self._save(record)
