"""Position and transition models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.LONG else -1


class Outcome(str, Enum):
    IDLE = "idle"
    HOLD = "hold"
    WIN = "win"
    ESCALATED = "escalated"
    MARGIN_CALL = "margin_call"


@dataclass(frozen=True)
class Position:
    client_id: int
    name: str
    direction: Direction
    base_size: float
    level: int
    entry_price: float
    current_price: float
    total_exposure: float
    pnl: float = 0.0
    active: bool = True
    margin_called: bool = False
    coordinated: bool = False
    whale: bool = False

    @property
    def live(self) -> bool:
        return self.active and not self.margin_called


@dataclass(frozen=True)
class PositionStepResult:
    position: Position
    outcome: Outcome
    level_before: int
    exposure: float = 0.0
    broker_pnl_delta: float = 0.0
    hedging_cost: float = 0.0
    payout: float = 0.0
