"""Random-walk price process with an armable gap event."""

from __future__ import annotations

import random
from dataclasses import dataclass

PRICE_FLOOR = 0.5
GAP_SIZE = 0.0200
GAP_TRIGGER = 0.98


@dataclass(frozen=True)
class MarketState:
    price: float
    volatility: float
    effective_volatility: float


@dataclass(frozen=True)
class PriceMove:
    price: float
    gap_fired: bool = False


def effective_volatility(volatility: float, crisis_mode: bool) -> float:
    return volatility * 3 if crisis_mode else volatility


def next_price(
    current: float,
    volatility: float,
    gap_armed: bool,
    crisis_mode: bool,
    rng: random.Random,
) -> PriceMove:
    """Advance the price by one tick.

    An armed gap fires when a draw lands in the top 2% of the unit interval
    and moves the price by exactly 200 pips in a direction chosen by a
    second draw. Otherwise the move is uniform in
    ``[-effective_volatility, effective_volatility)``.
    """
    gap_fired = False
    if gap_armed and rng.random() > GAP_TRIGGER:
        change = (1 if rng.random() > 0.5 else -1) * GAP_SIZE
        gap_fired = True
    else:
        change = (rng.random() - 0.5) * effective_volatility(volatility, crisis_mode) * 2
    return PriceMove(price=max(PRICE_FLOOR, current + change), gap_fired=gap_fired)
