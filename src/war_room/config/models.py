"""Configuration models for simulation runs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from war_room.config.presets import matching_preset_level
from war_room.errors import ConfigValidationError
from war_room.market.price import PRICE_FLOOR, effective_volatility


class HedgeStrategy(str, Enum):
    CALLS = "calls"
    PUTS = "puts"
    COLLARS = "collars"
    DYNAMIC = "dynamic"


class WinRule(str, Enum):
    """How a position's running P&L is tested against the win threshold.

    ``SYMMETRIC`` compares the absolute P&L, so a large adverse move also
    resolves as a win. ``TAKE_PROFIT`` only accepts favourable moves.
    """

    SYMMETRIC = "symmetric"
    TAKE_PROFIT = "take_profit"


@dataclass(frozen=True)
class SimulationConfig:
    capital_limit: float = 5_000_000.0
    base_client_count: int = 12
    whale_client_count: int = 8
    base_position_size: float = 10_000.0
    whale_position_size: float = 100_000.0
    starting_price: float = 1.0850
    volatility: float = 0.0012
    intervention_level: int = 5
    hedge_ratio: float = 0.7
    hedge_start_level: int = 3
    hedge_strategy: HedgeStrategy = HedgeStrategy.DYNAMIC
    max_client_exposure: float = 500_000.0
    hedging_enabled: bool = True
    whale_mode: bool = False
    coordinated_mode: bool = False
    force_wins_mode: bool = False
    crisis_mode: bool = False
    gap_armed: bool = False
    win_rule: WinRule = WinRule.SYMMETRIC
    history_capacity: int = 100

    def __post_init__(self) -> None:
        _positive("capital_limit", self.capital_limit)
        _at_least("base_client_count", self.base_client_count, 1)
        _at_least("whale_client_count", self.whale_client_count, 1)
        _positive("base_position_size", self.base_position_size)
        _positive("whale_position_size", self.whale_position_size)
        _positive("starting_price", self.starting_price)
        if self.starting_price < PRICE_FLOOR:
            raise ConfigValidationError(f"starting_price must be >= {PRICE_FLOOR}, got {self.starting_price}")
        _positive("volatility", self.volatility)
        _at_least("intervention_level", self.intervention_level, 1)
        _at_least("hedge_start_level", self.hedge_start_level, 1)
        _positive("max_client_exposure", self.max_client_exposure)
        _at_least("history_capacity", self.history_capacity, 1)
        if not 0.0 <= self.hedge_ratio <= 1.0:
            raise ConfigValidationError(f"hedge_ratio must be within [0, 1], got {self.hedge_ratio}")
        if not isinstance(self.hedge_strategy, HedgeStrategy):
            raise ConfigValidationError(f"Invalid hedge_strategy: {self.hedge_strategy!r}")
        if not isinstance(self.win_rule, WinRule):
            raise ConfigValidationError(f"Invalid win_rule: {self.win_rule!r}")

    @property
    def protection_level(self) -> Optional[int]:
        """Preset level whose four controls match this config, else ``None``."""
        return matching_preset_level(self)

    @property
    def effective_volatility(self) -> float:
        return effective_volatility(self.volatility, self.crisis_mode)

    @property
    def client_count(self) -> int:
        return self.whale_client_count if self.whale_mode else self.base_client_count

    @property
    def client_base_size(self) -> float:
        return self.whale_position_size if self.whale_mode else self.base_position_size

    @property
    def win_threshold_multiplier(self) -> float:
        return 0.003 if self.force_wins_mode else 0.01


@dataclass(frozen=True)
class MonitoringConfig:
    audit_log_path: Optional[str] = None
    alert_capacity: int = 10

    def __post_init__(self) -> None:
        _at_least("alert_capacity", self.alert_capacity, 1)


@dataclass(frozen=True)
class RuntimeConfig:
    step_interval_seconds: float = 0.5
    safe_mode_path: Optional[str] = None
    safe_mode_latched: bool = True

    def __post_init__(self) -> None:
        _positive("step_interval_seconds", self.step_interval_seconds)


@dataclass(frozen=True)
class RunConfig:
    name: str
    version: str
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)


def _positive(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ConfigValidationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigValidationError(f"{name} must be positive, got {value}")


def _at_least(name: str, value: int, minimum: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigValidationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigValidationError(f"{name} must be >= {minimum}, got {value}")
