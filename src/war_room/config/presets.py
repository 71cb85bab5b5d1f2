"""Protection level presets bundling the broker's risk controls."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional

from war_room.errors import ConfigValidationError

if TYPE_CHECKING:
    from war_room.config.models import SimulationConfig


@dataclass(frozen=True)
class ProtectionPreset:
    level: int
    name: str
    intervention_level: int
    hedge_ratio: float
    hedge_start_level: int
    max_client_exposure: float
    description: str

    def matches(self, config: SimulationConfig) -> bool:
        return (
            config.intervention_level == self.intervention_level
            and config.hedge_ratio == self.hedge_ratio
            and config.hedge_start_level == self.hedge_start_level
            and config.max_client_exposure == self.max_client_exposure
        )


PROTECTION_PRESETS: dict[int, ProtectionPreset] = {
    1: ProtectionPreset(1, "Minimal Protection", 7, 0.30, 5, 1_000_000.0, "High risk, high reward"),
    2: ProtectionPreset(2, "Low Protection", 6, 0.50, 4, 750_000.0, "Moderate risk tolerance"),
    3: ProtectionPreset(3, "Balanced Protection", 5, 0.70, 3, 500_000.0, "Balanced approach"),
    4: ProtectionPreset(4, "High Protection", 4, 0.85, 3, 300_000.0, "Conservative risk management"),
    5: ProtectionPreset(5, "Maximum Protection", 3, 0.95, 2, 200_000.0, "Ultra-conservative, maximum safety"),
}


def get_preset(level: int) -> ProtectionPreset:
    preset = PROTECTION_PRESETS.get(level)
    if preset is None:
        raise ConfigValidationError(f"Unknown protection level: {level}")
    return preset


def matching_preset_level(config: SimulationConfig) -> Optional[int]:
    for preset in PROTECTION_PRESETS.values():
        if preset.matches(config):
            return preset.level
    return None


def apply_protection_preset(config: SimulationConfig, level: int) -> SimulationConfig:
    preset = get_preset(level)
    return replace(
        config,
        intervention_level=preset.intervention_level,
        hedge_ratio=preset.hedge_ratio,
        hedge_start_level=preset.hedge_start_level,
        max_client_exposure=preset.max_client_exposure,
    )
