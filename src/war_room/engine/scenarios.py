"""Stress scenarios and scenario flag handling."""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Any

from war_room.config.models import SimulationConfig


class StressScenario(str, Enum):
    BLACK_SWAN = "black_swan"
    WHALE_ATTACK = "whale_attack"
    PERFECT_STORM = "perfect_storm"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


SCENARIO_OVERRIDES: dict[StressScenario, dict[str, Any]] = {
    StressScenario.BLACK_SWAN: {
        "gap_armed": True,
        "volatility": 0.0080,
        "coordinated_mode": True,
        "crisis_mode": True,
    },
    StressScenario.WHALE_ATTACK: {
        "whale_mode": True,
        "coordinated_mode": True,
        "volatility": 0.0030,
    },
    StressScenario.PERFECT_STORM: {
        "crisis_mode": True,
        "force_wins_mode": True,
        "volatility": 0.0100,
        "coordinated_mode": True,
    },
}

SCENARIO_FLAGS = ("gap_armed", "crisis_mode", "force_wins_mode", "whale_mode", "coordinated_mode")


def apply_scenario(config: SimulationConfig, scenario: StressScenario | str) -> SimulationConfig:
    scenario = StressScenario(scenario)
    return replace(config, **SCENARIO_OVERRIDES[scenario])


def clear_scenario_flags(config: SimulationConfig) -> SimulationConfig:
    return replace(config, **{flag: False for flag in SCENARIO_FLAGS})
