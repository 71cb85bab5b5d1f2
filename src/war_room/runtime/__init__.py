"""Host runtime: cadence loop and safe mode."""

from war_room.runtime.async_service import AsyncSimulationLoop
from war_room.runtime.safe_mode import SafeModeController, SafeModeState

__all__ = [
    "AsyncSimulationLoop",
    "SafeModeController",
    "SafeModeState",
]
