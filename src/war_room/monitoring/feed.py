"""Bounded most-recent-first alert retention for hosts."""

from __future__ import annotations

from collections import deque
from typing import Iterable

from war_room.risk.models import Alert


class AlertFeed:
    def __init__(self, capacity: int = 10) -> None:
        self._alerts: deque[Alert] = deque(maxlen=capacity)

    def push(self, alert: Alert) -> None:
        self._alerts.appendleft(alert)

    def extend(self, alerts: Iterable[Alert]) -> None:
        for alert in alerts:
            self.push(alert)

    def clear(self) -> None:
        self._alerts.clear()

    def items(self) -> list[Alert]:
        return list(self._alerts)

    def __len__(self) -> int:
        return len(self._alerts)
