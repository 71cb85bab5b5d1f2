"""Martingale exposure and hedging simulation engine."""

from war_room.config import SimulationConfig, load_config
from war_room.engine import EngineState, SimulationEngine, StepResult, StressScenario
from war_room.errors import ConfigValidationError, SimulationInvariantError
from war_room.risk import AggregateSnapshot, Alert, Severity

__all__ = [
    "AggregateSnapshot",
    "Alert",
    "ConfigValidationError",
    "EngineState",
    "Severity",
    "SimulationConfig",
    "SimulationEngine",
    "SimulationInvariantError",
    "StepResult",
    "StressScenario",
    "load_config",
]
