"""Initial client population."""

from __future__ import annotations

import random

from war_room.config.models import SimulationConfig
from war_room.positions.models import Direction, Position
from war_room.positions.sizing import total_exposure

INACTIVE_PROBABILITY = 0.3
ENTRY_SPREAD = 0.0020
COORDINATED_SHARE = 0.6


def initialize_population(config: SimulationConfig, rng: random.Random) -> tuple[Position, ...]:
    count = config.client_count
    base_size = config.client_base_size
    label = "Whale" if config.whale_mode else "Client"

    positions = []
    for index in range(count):
        active = rng.random() > INACTIVE_PROBABILITY
        direction = Direction.LONG if rng.random() > 0.5 else Direction.SHORT
        entry_price = config.starting_price + (rng.random() - 0.5) * ENTRY_SPREAD
        positions.append(
            Position(
                client_id=index + 1,
                name=f"{label} {index + 1}",
                direction=direction,
                base_size=base_size,
                level=1,
                entry_price=entry_price,
                current_price=config.starting_price,
                total_exposure=total_exposure(1, base_size),
                active=active,
                coordinated=config.coordinated_mode and index < count * COORDINATED_SHARE,
                whale=config.whale_mode,
            )
        )
    return tuple(positions)
