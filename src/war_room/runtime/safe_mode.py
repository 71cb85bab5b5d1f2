"""Safe mode latch that stops the host loop after a failed step."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from war_room.monitoring.monitor import Monitor


@dataclass(frozen=True)
class SafeModeState:
    enabled: bool = False
    reason: Optional[str] = None
    since: Optional[datetime] = None
    step: Optional[int] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "reason": self.reason,
            "since": self.since.isoformat() if self.since else None,
            "step": self.step,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> SafeModeState:
        since = payload.get("since")
        return cls(
            enabled=bool(payload.get("enabled", False)),
            reason=payload.get("reason"),
            since=datetime.fromisoformat(since) if since else None,
            step=payload.get("step"),
        )


class SafeModeController:
    """With a ``path`` the latch survives restarts; without one it is in-memory only.

    A latched controller keeps the first failure's reason until ``clear`` is
    called explicitly.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        latched: bool = True,
        monitor: Optional[Monitor] = None,
        audit_log: Optional[object] = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.latched = latched
        self.monitor = monitor
        self._audit_log = audit_log
        self._state = SafeModeState()
        if self.path is not None and self.path.exists():
            self._state = SafeModeState.from_payload(json.loads(self.path.read_text(encoding="utf-8")))

    @property
    def state(self) -> SafeModeState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._state.enabled

    def enable(self, reason: str, step: Optional[int] = None) -> bool:
        if self._state.enabled and self.latched:
            return False
        self._transition(SafeModeState(True, reason, datetime.now(timezone.utc), step))
        if self.monitor is not None:
            self.monitor.safe_mode(reason if step is None else f"step {step}: {reason}")
        return True

    def clear(self, reason: str = "manual") -> None:
        self._transition(SafeModeState(False, reason, datetime.now(timezone.utc)))

    def _transition(self, state: SafeModeState) -> None:
        self._state = state
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(state.to_payload(), indent=2), encoding="utf-8")
        if self._audit_log is not None:
            self._audit_log.log("safe_mode", {"enabled": state.enabled, "reason": state.reason, "step": state.step})
