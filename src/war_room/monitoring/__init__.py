"""Monitoring exports."""

from war_room.monitoring.audit import AuditLog
from war_room.monitoring.feed import AlertFeed
from war_room.monitoring.monitor import Monitor
from war_room.monitoring.notifier import LogNotifier, MemoryNotifier, Notifier

__all__ = [
    "AlertFeed",
    "AuditLog",
    "LogNotifier",
    "MemoryNotifier",
    "Monitor",
    "Notifier",
]
