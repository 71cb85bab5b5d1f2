"""Error types shared by the simulation core."""

from __future__ import annotations


class ConfigValidationError(ValueError):
    """Raised when a configuration value is out of range."""


class SimulationInvariantError(RuntimeError):
    """Raised when simulation state breaks an invariant mid-step."""


def require(condition: bool, message: str) -> None:
    if not condition:
        raise SimulationInvariantError(message)
