from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from .models import NetworkRecord

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS network_records (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    client_ip TEXT,
                    source TEXT NOT NULL,
                    ipv4 TEXT,
                    ssid TEXT,
                    estimated INTEGER,
                    payload TEXT NOT NULL
                )
                """
            )

    def save(self, record: NetworkRecord) -> int:
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO network_records (timestamp, client_ip, source, ipv4, ssid, estimated, payload)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.timestamp,
                    record.client_ip,
                    record.source,
                    record.ipv4,
                    record.ssid,
                    int(record.estimated),
                    json.dumps(record.to_dict()),
                ),
            )
            row_id = int(cur.lastrowid)
        logger.debug("stored network record %d (%s)", row_id, record.source)
        return row_id

    def recent(self, limit: int = 20) -> list[dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT payload FROM network_records ORDER BY id DESC LIMIT ?",
                (max(1, limit),),
            ).fetchall()
        return [json.loads(row["payload"]) for row in rows]

    def count(self) -> int:
        with self._connect() as conn:
            return int(conn.execute("SELECT COUNT(*) FROM network_records").fetchone()[0])
