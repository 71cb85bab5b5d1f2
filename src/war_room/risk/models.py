"""Aggregate risk metrics and alert records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Alert:
    severity: Severity
    message: str
    step: int
    timestamp: datetime


@dataclass(frozen=True)
class HistoryPoint:
    step: int
    price: float
    net_pnl: float
    exposure: float
    hedging_cost: float


@dataclass(frozen=True)
class AggregateSnapshot:
    step: int
    price: float
    broker_pnl: float
    hedging_cost: float
    net_pnl: float
    total_exposure: float
    peak_pnl: float
    max_drawdown: float
    history: tuple[HistoryPoint, ...] = ()

    @property
    def drawdown(self) -> float:
        return self.peak_pnl - self.net_pnl
