from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

COMMAND_MODES = ("auto", "subprocess", "none")


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 5000
    command_mode: str = "auto"
    command_timeout_s: float = 10.0
    dhcp_defaults_to_gateway: bool = True
    db_path: Optional[Path] = None
    deployed_on: Optional[str] = None
    include_interfaces: bool = True
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env

        command_mode = env.get("LOCALNET_COMMAND_MODE", "auto").strip().lower()
        if command_mode not in COMMAND_MODES:
            raise ValueError(f"LOCALNET_COMMAND_MODE must be one of {', '.join(COMMAND_MODES)}, got {command_mode!r}")

        db_path = env.get("LOCALNET_DB_PATH", "").strip()
        origins = [o.strip() for o in env.get("LOCALNET_CORS_ORIGINS", "*").split(",") if o.strip()]

        return cls(
            host=env.get("HOST", "127.0.0.1"),
            port=int(env.get("PORT", "5000")),
            command_mode=command_mode,
            command_timeout_s=float(env.get("LOCALNET_COMMAND_TIMEOUT", "10")),
            dhcp_defaults_to_gateway=_env_flag(env, "LOCALNET_DHCP_DEFAULTS_TO_GATEWAY", True),
            db_path=Path(db_path) if db_path else None,
            deployed_on=env.get("LOCALNET_DEPLOYED_ON", "").strip() or None,
            include_interfaces=_env_flag(env, "LOCALNET_INCLUDE_INTERFACES", True),
            cors_origins=origins or ["*"],
            log_level=env.get("LOCALNET_LOG_LEVEL", "INFO").upper(),
        )
