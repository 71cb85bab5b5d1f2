"""Fold per-position results into broker-level risk metrics and alerts."""

from __future__ import annotations

import math
from collections import deque
from datetime import datetime
from typing import Iterable, Optional

from war_room.errors import require
from war_room.positions.models import Outcome, PositionStepResult
from war_room.risk.models import AggregateSnapshot, Alert, HistoryPoint, Severity

CAPITAL_WARNING_FRACTION = 0.8
HIGH_LEVEL_WIN = 5
CRITICAL_LEVEL = 6


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def position_alert(result: PositionStepResult, step: int, now: datetime) -> Optional[Alert]:
    name = result.position.name
    if result.outcome == Outcome.WIN and result.level_before >= HIGH_LEVEL_WIN:
        return Alert(
            Severity.DANGER,
            f"{name}: HIGH LEVEL WIN - Loss ${_round_half_up(result.payout / 1000)}k",
            step,
            now,
        )
    if result.outcome == Outcome.MARGIN_CALL:
        return Alert(
            Severity.INFO,
            f"{name}: Margin call - Profit ${_round_half_up(result.broker_pnl_delta / 1000)}k",
            step,
            now,
        )
    if result.outcome == Outcome.ESCALATED and result.position.level >= CRITICAL_LEVEL:
        return Alert(Severity.WARNING, f"{name}: CRITICAL LEVEL {result.position.level}", step, now)
    return None


class RiskAggregator:
    """Running broker totals across the lifetime of a simulation."""

    def __init__(self, history_capacity: int = 100) -> None:
        self._history: deque[HistoryPoint] = deque(maxlen=history_capacity)
        self.reset()

    def reset(self, price: float = 0.0) -> None:
        self._history.clear()
        self.step = 0
        self.price = price
        self.broker_pnl = 0.0
        self.hedging_cost = 0.0
        self.total_exposure = 0.0
        self.peak_pnl = 0.0
        self.max_drawdown = 0.0

    @property
    def history_capacity(self) -> int:
        return self._history.maxlen or 0

    def resize_history(self, capacity: int) -> None:
        if capacity != self._history.maxlen:
            self._history = deque(self._history, maxlen=capacity)

    @property
    def net_pnl(self) -> float:
        return self.broker_pnl - self.hedging_cost

    def fold(
        self,
        step: int,
        price: float,
        results: Iterable[PositionStepResult],
        capital_limit: float,
        now: datetime,
    ) -> tuple[AggregateSnapshot, list[Alert]]:
        alerts: list[Alert] = []
        exposure = 0.0
        broker_pnl = self.broker_pnl
        hedging_cost = self.hedging_cost

        for result in results:
            require(result.exposure >= 0, f"{result.position.name}: negative exposure {result.exposure}")
            require(
                math.isfinite(result.hedging_cost) and result.hedging_cost >= 0,
                f"{result.position.name}: invalid hedging cost {result.hedging_cost}",
            )
            if result.outcome != Outcome.IDLE:
                exposure += result.exposure
            broker_pnl += result.broker_pnl_delta
            hedging_cost += result.hedging_cost
            alert = position_alert(result, step, now)
            if alert is not None:
                alerts.append(alert)

        require(math.isfinite(broker_pnl), f"Broker P&L is not finite: {broker_pnl}")

        net_pnl = broker_pnl - hedging_cost
        peak_pnl = max(self.peak_pnl, net_pnl)
        max_drawdown = max(self.max_drawdown, peak_pnl - net_pnl)
        require(max_drawdown >= 0, f"Negative drawdown {max_drawdown}")

        if abs(net_pnl) > capital_limit * CAPITAL_WARNING_FRACTION:
            alerts.append(
                Alert(
                    Severity.DANGER,
                    f"CAPITAL WARNING: {_round_half_up(abs(net_pnl) / capital_limit * 100)}% of limit",
                    step,
                    now,
                )
            )

        self.step = step
        self.price = price
        self.broker_pnl = broker_pnl
        self.hedging_cost = hedging_cost
        self.total_exposure = exposure
        self.peak_pnl = peak_pnl
        self.max_drawdown = max_drawdown
        self._history.append(
            HistoryPoint(
                step=step,
                price=price,
                net_pnl=net_pnl,
                exposure=exposure,
                hedging_cost=hedging_cost,
            )
        )
        return self.snapshot(), alerts

    def snapshot(self) -> AggregateSnapshot:
        return AggregateSnapshot(
            step=self.step,
            price=self.price,
            broker_pnl=self.broker_pnl,
            hedging_cost=self.hedging_cost,
            net_pnl=self.net_pnl,
            total_exposure=self.total_exposure,
            peak_pnl=self.peak_pnl,
            max_drawdown=self.max_drawdown,
            history=tuple(self._history),
        )
