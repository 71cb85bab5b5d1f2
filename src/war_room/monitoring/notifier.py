"""Notification backends for simulation alerts."""

from __future__ import annotations

import sys
from collections import deque
from dataclasses import dataclass, field
from typing import TextIO


class Notifier:
    def notify(self, event: str, message: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class LogNotifier(Notifier):
    prefix: str = "[WAR-ROOM]"
    stream: TextIO | None = None

    def notify(self, event: str, message: str) -> None:
        print(f"{self.prefix} {event}: {message}", file=self.stream or sys.stdout)


@dataclass
class MemoryNotifier(Notifier):
    """Keeps the latest notifications for hosts that poll instead of print."""

    capacity: int = 100
    events: deque[tuple[str, str]] = field(init=False)

    def __post_init__(self) -> None:
        self.events = deque(maxlen=self.capacity)

    def notify(self, event: str, message: str) -> None:
        self.events.append((event, message))

    def drain(self) -> list[tuple[str, str]]:
        drained = list(self.events)
        self.events.clear()
        return drained
