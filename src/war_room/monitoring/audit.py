"""Append-only JSON-lines audit trail for simulation runs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from war_room.risk.models import Alert


class AuditLog:
    def __init__(self, path: str | Path, run_id: str | None = None, config_hash: str | None = None) -> None:
        self.path = Path(path)
        self.run_id = run_id
        self.config_hash = config_hash
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, event: str, payload: dict[str, Any]) -> None:
        self._append(
            [
                {
                    "ts": datetime.now(timezone.utc).isoformat(),
                    "run_id": self.run_id,
                    "config_hash": self.config_hash,
                    "event": event,
                    "payload": payload,
                }
            ]
        )

    def log_alerts(self, alerts: Iterable[Alert]) -> int:
        """Write one ``alert`` record per alert, stamped with the alert's own time."""
        records = [
            {
                "ts": alert.timestamp.isoformat(),
                "run_id": self.run_id,
                "config_hash": self.config_hash,
                "event": "alert",
                "payload": {"step": alert.step, "severity": alert.severity.value, "message": alert.message},
            }
            for alert in alerts
        ]
        if records:
            self._append(records)
        return len(records)

    def read(self, event: str | None = None) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        records = []
        for line in self.path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            record = json.loads(line)
            if event is None or record.get("event") == event:
                records.append(record)
        return records

    def _append(self, records: list[dict[str, Any]]) -> None:
        with self.path.open("a", encoding="utf-8") as handle:
            for record in records:
                handle.write(json.dumps(record, default=str))
                handle.write("\n")
