"""Alert routing from simulation steps to notifiers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from war_room.monitoring.notifier import Notifier
from war_room.risk.models import Alert, Severity

EVENT_NAMES = {
    Severity.INFO: "INFO",
    Severity.WARNING: "WARNING",
    Severity.DANGER: "DANGER",
}


@dataclass
class Monitor:
    notifier: Notifier
    min_severity: Severity = Severity.INFO

    def alert(self, alert: Alert) -> bool:
        if _rank(alert.severity) < _rank(self.min_severity):
            return False
        self.notifier.notify(EVENT_NAMES[alert.severity], f"step {alert.step}: {alert.message}")
        return True

    def alerts(self, alerts: Iterable[Alert]) -> int:
        return sum(1 for alert in alerts if self.alert(alert))

    def safe_mode(self, reason: str) -> None:
        self.notifier.notify("SAFE_MODE", reason)


def _rank(severity: Severity) -> int:
    return list(EVENT_NAMES).index(severity)
