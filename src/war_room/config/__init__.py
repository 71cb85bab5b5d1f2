"""Config loading, validation and protection presets."""

from war_room.config.loader import compute_config_hash, load_config, parse_simulation, serialize_config
from war_room.config.models import (
    HedgeStrategy,
    MonitoringConfig,
    RunConfig,
    RuntimeConfig,
    SimulationConfig,
    WinRule,
)
from war_room.config.presets import (
    PROTECTION_PRESETS,
    ProtectionPreset,
    apply_protection_preset,
    get_preset,
)

__all__ = [
    "HedgeStrategy",
    "MonitoringConfig",
    "PROTECTION_PRESETS",
    "ProtectionPreset",
    "RunConfig",
    "RuntimeConfig",
    "SimulationConfig",
    "WinRule",
    "apply_protection_preset",
    "compute_config_hash",
    "get_preset",
    "load_config",
    "parse_simulation",
    "serialize_config",
]
