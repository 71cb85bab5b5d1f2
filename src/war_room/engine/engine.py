"""Simulation engine orchestrating one tick at a time."""

from __future__ import annotations

import random
from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from war_room.config.models import HedgeStrategy, SimulationConfig, WinRule
from war_room.config.presets import ProtectionPreset, apply_protection_preset, get_preset
from war_room.engine.population import initialize_population
from war_room.engine.scenarios import StressScenario, apply_scenario, clear_scenario_flags
from war_room.errors import ConfigValidationError, require
from war_room.market.price import MarketState, next_price
from war_room.positions.machine import step_position
from war_room.positions.models import Position
from war_room.risk.aggregator import RiskAggregator
from war_room.risk.models import AggregateSnapshot, Alert, Severity

Clock = Callable[[], datetime]


class EngineState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class StepResult:
    snapshot: AggregateSnapshot
    positions: tuple[Position, ...]
    alerts: tuple[Alert, ...]
    market: MarketState
    gap_fired: bool = False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SimulationEngine:
    """Owns the market, the client population and the running aggregates.

    ``step`` is the only operation that advances time. Configuration changes
    take effect on the next step; population-shaping flags (whale and
    coordinated mode) take effect on the next ``reset`` or
    ``regenerate_population``. The engine does no locking: callers must not
    run two steps on one instance concurrently.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._config = config or SimulationConfig()
        self._rng = rng if rng is not None else random.Random(seed)
        self._clock = clock or _utc_now
        self._risk = RiskAggregator(self._config.history_capacity)
        self._pending_alerts: list[tuple[Severity, str]] = []
        self._positions: tuple[Position, ...] = ()
        self.state = EngineState.IDLE
        self.reset()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def positions(self) -> tuple[Position, ...]:
        return self._positions

    @property
    def market(self) -> MarketState:
        return self._market

    @property
    def step_count(self) -> int:
        return self._risk.step

    def snapshot(self) -> AggregateSnapshot:
        return self._risk.snapshot()

    def configure(self, config: Optional[SimulationConfig] = None, **changes: Any) -> SimulationConfig:
        """Replace the configuration and/or merge individual fields into it.

        A ``protection_level`` change applies that preset before any of the
        other changes, so explicit control values override the preset.
        """
        base = config if config is not None else self._config
        if not isinstance(base, SimulationConfig):
            raise ConfigValidationError(f"Expected SimulationConfig, got {type(base).__name__}")
        values = _coerce_changes(changes)
        if "protection_level" in values:
            base = apply_protection_preset(base, values.pop("protection_level"))
        if values:
            base = replace(base, **values)
        self._config = base
        self._risk.resize_history(base.history_capacity)
        return base

    def apply_protection_preset(self, level: int) -> ProtectionPreset:
        preset = get_preset(level)
        self._config = apply_protection_preset(self._config, level)
        self._queue_alert(Severity.INFO, f"Applied {preset.name} - {preset.description}")
        return preset

    def arm_gap_event(self) -> None:
        self.configure(gap_armed=True)

    def enable_whale_mode(self, enabled: bool = True) -> None:
        self.configure(whale_mode=enabled)

    def enable_coordinated_mode(self, enabled: bool = True) -> None:
        self.configure(coordinated_mode=enabled)

    def enable_force_wins(self, enabled: bool = True) -> None:
        self.configure(force_wins_mode=enabled)

    def enable_crisis_volatility(self, enabled: bool = True) -> None:
        self.configure(crisis_mode=enabled)

    def load_scenario(self, scenario: StressScenario | str) -> StressScenario:
        try:
            scenario = StressScenario(scenario)
        except ValueError as exc:
            raise ConfigValidationError(f"Unknown stress scenario: {scenario}") from exc
        self.configure(apply_scenario(self._config, scenario))
        self.regenerate_population()
        self._queue_alert(Severity.INFO, f"Loaded {scenario.label} scenario")
        return scenario

    def start(self) -> None:
        self.state = EngineState.RUNNING

    def pause(self) -> None:
        self.state = EngineState.IDLE

    def reset(self, clear_scenarios: bool = False) -> None:
        if clear_scenarios:
            self._config = clear_scenario_flags(self._config)
        self.state = EngineState.IDLE
        self._pending_alerts.clear()
        self._market = self._market_at(self._config.starting_price)
        self._risk.resize_history(self._config.history_capacity)
        self._risk.reset(self._config.starting_price)
        self.regenerate_population()

    def regenerate_population(self) -> tuple[Position, ...]:
        self._positions = initialize_population(self._config, self._rng)
        return self._positions

    def step(self) -> StepResult:
        config = self._config
        now = self._clock()
        step = self._risk.step + 1
        alerts = [Alert(severity, message, step, now) for severity, message in self._pending_alerts]
        self._pending_alerts.clear()

        move = next_price(
            self._market.price,
            config.volatility,
            gap_armed=config.gap_armed,
            crisis_mode=config.crisis_mode,
            rng=self._rng,
        )
        require(move.price > 0, f"Non-positive market price {move.price}")
        if move.gap_fired:
            alerts.append(Alert(Severity.DANGER, "MARKET GAP: 200 pips!", step, now))
            self._config = replace(self._config, gap_armed=False)
        self._market = self._market_at(move.price)

        results = [step_position(position, move.price, config) for position in self._positions]
        snapshot, risk_alerts = self._risk.fold(step, move.price, results, config.capital_limit, now)
        alerts.extend(risk_alerts)
        self._positions = tuple(result.position for result in results)

        return StepResult(
            snapshot=snapshot,
            positions=self._positions,
            alerts=tuple(alerts),
            market=self._market,
            gap_fired=move.gap_fired,
        )

    def _market_at(self, price: float) -> MarketState:
        return MarketState(
            price=price,
            volatility=self._config.volatility,
            effective_volatility=self._config.effective_volatility,
        )

    def _queue_alert(self, severity: Severity, message: str) -> None:
        self._pending_alerts.append((severity, message))


def _coerce_changes(changes: dict[str, Any]) -> dict[str, Any]:
    known = {item.name for item in fields(SimulationConfig)} | {"protection_level"}
    unknown = sorted(set(changes) - known)
    if unknown:
        raise ConfigValidationError(f"Unknown configuration fields: {', '.join(unknown)}")
    values = dict(changes)
    try:
        if "hedge_strategy" in values:
            values["hedge_strategy"] = HedgeStrategy(values["hedge_strategy"])
        if "win_rule" in values:
            values["win_rule"] = WinRule(values["win_rule"])
    except ValueError as exc:
        raise ConfigValidationError(str(exc)) from exc
    return values
