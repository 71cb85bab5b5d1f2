"""Martingale positions and their step transitions."""

from war_room.positions.machine import is_win, loss_limit, step_position
from war_room.positions.models import Direction, Outcome, Position, PositionStepResult
from war_room.positions.sizing import position_multiplier, position_size, total_exposure

__all__ = [
    "Direction",
    "Outcome",
    "Position",
    "PositionStepResult",
    "is_win",
    "loss_limit",
    "position_multiplier",
    "position_size",
    "step_position",
    "total_exposure",
]
