from __future__ import annotations

import argparse
import logging
from typing import Any

from flask import Flask, jsonify, request
from flask_cors import CORS

from localnet_agent.config import Settings
from localnet_agent.core.collector import HINT_HEADERS, NetworkCollector, NoNetworkDataError, RequestMeta
from localnet_agent.core.commands import CommandRunner, select_runner
from localnet_agent.core.network import normalize_client_ip
from localnet_agent.core.parsing import DEFAULT_LABELS, IpconfigLabels
from localnet_agent.core.storage import RecordStore

logger = logging.getLogger(__name__)

FAILURE = "Failed to get network information"


def _error(status: int, error: str, message: str):
    return jsonify({"error": error, "message": message}), status


def _request_meta() -> RequestMeta:
    caller = (
        request.headers.get("X-Forwarded-For")
        or request.headers.get("X-Real-IP")
        or request.remote_addr
    )
    hints = {}
    for name in HINT_HEADERS:
        value = request.headers.get(name, "").strip()
        if value:
            hints[name] = value
    return RequestMeta(
        client_ip=normalize_client_ip(caller),
        private_ip=request.args.get("privateIp") or None,
        dhcp_server=request.args.get("dhcpServer") or None,
        adapter=request.args.get("adapter") or None,
        hints=hints,
    )


def _submitted_output() -> tuple[Any, Any]:
    if request.is_json:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return None, None
        return body.get("ipconfig"), body.get("wlan") or ""
    return request.get_data(as_text=True), ""


def create_app(
    settings: Settings | None = None,
    runner: CommandRunner | None = None,
    store: RecordStore | None = None,
    labels: IpconfigLabels = DEFAULT_LABELS,
) -> Flask:
    settings = settings or Settings.from_env()
    runner = runner or select_runner(settings)
    if store is None and settings.db_path is not None:
        store = RecordStore(settings.db_path)
    collector = NetworkCollector(settings, runner, store=store, labels=labels)

    app = Flask(__name__)
    CORS(
        app,
        resources={r"/network*": {"origins": settings.cors_origins}},
        methods=["GET", "POST", "OPTIONS"],
        send_wildcard="*" in settings.cors_origins,
    )
    app.extensions["localnet_collector"] = collector

    @app.route("/network", methods=["GET", "POST", "OPTIONS"])
    def network():
        if request.method == "OPTIONS":
            return "", 200

        meta = _request_meta()
        try:
            if request.method == "POST":
                ipconfig_text, wlan_text = _submitted_output()
                if not isinstance(ipconfig_text, str) or not ipconfig_text.strip():
                    return _error(400, "Bad request", "POST body must carry ipconfig output")
                if not isinstance(wlan_text, str):
                    return _error(400, "Bad request", "wlan must be a string")
                record = collector.from_submitted(ipconfig_text, wlan_text, meta)
            else:
                record = collector.collect(meta)
        except NoNetworkDataError as exc:
            logger.info("no network data for %s: %s", meta.client_ip, exc)
            return _error(404, "No network data found", str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("network request failed")
            return _error(500, FAILURE, str(exc))

        return jsonify(record.to_dict())

    @app.get("/network/history")
    def network_history():
        if collector.store is None:
            return _error(404, "History disabled", "Set LOCALNET_DB_PATH to keep produced records")
        limit = request.args.get("limit", default=20, type=int)
        return jsonify({"records": collector.store.recent(limit)})

    return app


def run(argv: list[str] | None = None) -> None:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(prog="localnet-agent", description="Serve host network configuration as JSON")
    parser.add_argument("--host", default=settings.host, help="Bind address (or env HOST)")
    parser.add_argument("--port", type=int, default=settings.port, help="Listen port (or env PORT)")
    args = parser.parse_args(argv)

    # Ensure Flask logger is usable when launched from a service manager.
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(message)s")

    app = create_app(settings)
    logger.info("Network agent running at http://%s:%d/network", args.host, args.port)
    app.run(host=args.host, port=args.port)


if __name__ == "__main__":
    run()
