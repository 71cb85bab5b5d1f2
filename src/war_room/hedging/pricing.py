"""At-the-money option premium proxy for hedging escalated positions."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from war_room.config.models import HedgeStrategy

if TYPE_CHECKING:
    from war_room.positions.models import Direction

TRADING_DAYS = 252
TIME_TO_EXPIRY = 0.083
RISK_FREE_RATE = 0.05
LEVEL_GROWTH = 1.3
PREMIUM_SCALE = 0.002


def atm_premium(market_price: float, volatility: float) -> float:
    """Coarse one-month ATM premium per unit of notional.

    Strike equals spot, so the log-moneyness term is always zero.
    """
    annual_vol = volatility * math.sqrt(TRADING_DAYS)
    strike = market_price
    d1 = (
        math.log(market_price / strike) + (RISK_FREE_RATE + 0.5 * annual_vol**2) * TIME_TO_EXPIRY
    ) / (annual_vol * math.sqrt(TIME_TO_EXPIRY))
    return market_price * 0.4 * math.sqrt(TIME_TO_EXPIRY / (2 * math.pi)) * math.exp(-0.5 * d1 * d1)


def strategy_multiplier(strategy: HedgeStrategy, direction: Direction) -> float:
    if strategy == HedgeStrategy.CALLS:
        return 1.2 if direction == "short" else 0.8
    if strategy == HedgeStrategy.PUTS:
        return 1.2 if direction == "long" else 0.8
    if strategy == HedgeStrategy.COLLARS:
        return 0.6
    return 1.0


def hedge_cost(
    exposure: float,
    level: int,
    direction: Direction,
    market_price: float,
    volatility: float,
    hedge_start_level: int,
    hedge_ratio: float,
    strategy: HedgeStrategy,
    hedging_enabled: bool = True,
) -> float:
    if not hedging_enabled or level < hedge_start_level:
        return 0.0
    premium = atm_premium(market_price, volatility)
    level_multiplier = LEVEL_GROWTH ** (level - hedge_start_level)
    return (
        exposure
        * premium
        * strategy_multiplier(strategy, direction)
        * level_multiplier
        * hedge_ratio
        * PREMIUM_SCALE
    )
