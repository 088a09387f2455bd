from __future__ import annotations

import logging
import platform
import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol, Sequence

from localnet_agent.config import Settings

logger = logging.getLogger(__name__)

WLAN_COMMAND = ("netsh", "wlan", "show", "interfaces")
IPCONFIG_COMMAND = ("ipconfig", "/all")


@dataclass
class CommandResult:
    args: tuple[str, ...]
    stdout: str = ""
    ok: bool = False
    error: str | None = None
    timed_out: bool = False


class CommandRunner(Protocol):
    available: bool

    def run(self, args: Sequence[str], timeout: float) -> CommandResult:
        ...


class SubprocessRunner:
    available = True

    def __init__(self, encoding: str | None = None) -> None:
        # ipconfig and netsh write in the console (OEM) codepage, not the ANSI one.
        if encoding is None and platform.system() == "Windows":
            encoding = "oem"
        self.encoding = encoding

    def run(self, args: Sequence[str], timeout: float) -> CommandResult:
        argv = tuple(args)
        try:
            proc = subprocess.run(
                list(argv),
                capture_output=True,
                text=True,
                encoding=self.encoding,
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("%s timed out after %.1fs", " ".join(argv), timeout)
            return CommandResult(args=argv, error=f"timed out after {timeout:g}s", timed_out=True)
        except OSError as exc:
            logger.warning("%s could not be started: %s", " ".join(argv), exc)
            return CommandResult(args=argv, error=str(exc))

        if proc.returncode != 0:
            message = (proc.stderr or "").strip() or (proc.stdout or "").strip() or f"exit status {proc.returncode}"
            logger.warning("%s failed: %s", " ".join(argv), message)
            return CommandResult(args=argv, stdout=proc.stdout or "", error=message)
        return CommandResult(args=argv, stdout=proc.stdout or "", ok=True)


class NullRunner:
    """Runner for hosts where the Windows network commands do not exist."""

    available = False

    def __init__(self, reason: str = "network commands are not available on this host") -> None:
        self.reason = reason

    def run(self, args: Sequence[str], timeout: float) -> CommandResult:
        return CommandResult(args=tuple(args), error=self.reason)


def select_runner(settings: Settings, system: str | None = None) -> CommandRunner:
    system = (system or platform.system()).lower()
    if settings.command_mode == "subprocess":
        return SubprocessRunner()
    if settings.command_mode == "none":
        return NullRunner("network commands disabled by configuration")
    if settings.deployed_on:
        return NullRunner(f"running as a {settings.deployed_on} deployment")
    if system == "windows":
        return SubprocessRunner()
    return NullRunner(f"network commands are not available on {system or 'this host'}")


@dataclass
class CapturedOutput:
    wlan: CommandResult
    ipconfig: CommandResult


def capture_network_output(runner: CommandRunner, timeout: float) -> CapturedOutput:
    """Run the WiFi report and the IP configuration report side by side."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        wlan = pool.submit(runner.run, WLAN_COMMAND, timeout)
        ipconfig = pool.submit(runner.run, IPCONFIG_COMMAND, timeout)
        return CapturedOutput(wlan=wlan.result(), ipconfig=ipconfig.result())
