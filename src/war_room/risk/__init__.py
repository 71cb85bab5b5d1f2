"""Risk aggregation and alerting."""

from war_room.risk.aggregator import RiskAggregator, position_alert
from war_room.risk.models import AggregateSnapshot, Alert, HistoryPoint, Severity

__all__ = [
    "AggregateSnapshot",
    "Alert",
    "HistoryPoint",
    "RiskAggregator",
    "Severity",
    "position_alert",
]
