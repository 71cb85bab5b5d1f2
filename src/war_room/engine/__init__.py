"""Simulation engine and scenario controls."""

from war_room.engine.engine import EngineState, SimulationEngine, StepResult
from war_room.engine.population import initialize_population
from war_room.engine.scenarios import SCENARIO_OVERRIDES, StressScenario, apply_scenario, clear_scenario_flags

__all__ = [
    "EngineState",
    "SCENARIO_OVERRIDES",
    "SimulationEngine",
    "StepResult",
    "StressScenario",
    "apply_scenario",
    "clear_scenario_flags",
    "initialize_population",
]
