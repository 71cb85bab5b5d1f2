"""Load simulation run configuration files."""

from __future__ import annotations

import hashlib
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from war_room.config.models import (
    HedgeStrategy,
    MonitoringConfig,
    RunConfig,
    RuntimeConfig,
    SimulationConfig,
    WinRule,
)
from war_room.config.presets import apply_protection_preset

_PRESET_FIELDS = ("intervention_level", "hedge_ratio", "hedge_start_level", "max_client_exposure")


def load_config(path: str | Path) -> RunConfig:
    path = Path(path)
    data = _load_yaml(path)

    name = str(_require(data, "name"))
    version = str(_require(data, "version"))
    simulation = parse_simulation(_require(data, "simulation"))
    monitoring = _parse_monitoring(data.get("monitoring") or {})
    runtime = _parse_runtime(data.get("runtime") or {})

    return RunConfig(
        name=name,
        version=version,
        simulation=simulation,
        monitoring=monitoring,
        runtime=runtime,
    )


def compute_config_hash(path: str | Path) -> str:
    path = Path(path)
    content = path.read_bytes()
    return hashlib.sha256(content).hexdigest()


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required config key: {key}")
    return data[key]


def _parse_enum(enum_cls, value: Any, key: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValueError(f"Invalid {key}: {value}") from exc


def parse_simulation(data: dict[str, Any]) -> SimulationConfig:
    """Build a SimulationConfig from a plain mapping.

    A ``protection_level`` entry applies its preset first; any of the four
    preset fields given explicitly override the preset values, after which
    ``protection_level`` reads ``None`` unless the result still matches a preset.
    """
    if not isinstance(data, dict):
        raise ValueError("simulation section must be a mapping")
    known = {item.name for item in fields(SimulationConfig)} | {"protection_level"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown simulation keys: {', '.join(unknown)}")

    values = dict(data)
    if "hedge_strategy" in values:
        values["hedge_strategy"] = _parse_enum(HedgeStrategy, values["hedge_strategy"], "hedge_strategy")
    if "win_rule" in values:
        values["win_rule"] = _parse_enum(WinRule, values["win_rule"], "win_rule")

    level = values.pop("protection_level", None)
    overrides = {key: values.pop(key) for key in _PRESET_FIELDS if key in values}
    config = SimulationConfig(**values)
    if level is not None:
        config = apply_protection_preset(config, int(level))
    if overrides:
        config = replace(config, **overrides)
    return config


def _parse_monitoring(data: dict[str, Any]) -> MonitoringConfig:
    audit_log_path = data.get("audit_log_path")
    return MonitoringConfig(
        audit_log_path=str(audit_log_path) if audit_log_path else None,
        alert_capacity=int(data.get("alert_capacity", 10)),
    )


def _parse_runtime(data: dict[str, Any]) -> RuntimeConfig:
    safe_mode_path: Optional[str] = data.get("safe_mode_path")
    return RuntimeConfig(
        step_interval_seconds=float(data.get("step_interval_seconds", 0.5)),
        safe_mode_path=str(safe_mode_path) if safe_mode_path else None,
        safe_mode_latched=bool(data.get("safe_mode_latched", True)),
    )


def serialize_config(config: RunConfig) -> dict[str, Any]:
    payload = asdict(config)
    payload["simulation"]["hedge_strategy"] = config.simulation.hedge_strategy.value
    payload["simulation"]["win_rule"] = config.simulation.win_rule.value
    payload["simulation"]["protection_level"] = config.simulation.protection_level
    return payload
