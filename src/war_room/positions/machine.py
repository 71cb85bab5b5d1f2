"""Per-client martingale state machine."""

from __future__ import annotations

import math
from dataclasses import replace

from war_room.config.models import SimulationConfig, WinRule
from war_room.errors import require
from war_room.hedging.pricing import hedge_cost
from war_room.positions.models import Outcome, Position, PositionStepResult
from war_room.positions.sizing import position_multiplier, position_size, total_exposure

LOSS_FRACTION = 0.5


def is_win(pnl: float, threshold: float, rule: WinRule) -> bool:
    if rule == WinRule.TAKE_PROFIT:
        return pnl > threshold
    return abs(pnl) > threshold


def loss_limit(level: int, base_size: float) -> float:
    return -base_size * position_multiplier(level) * LOSS_FRACTION


def hedge_protected(level: int, config: SimulationConfig) -> bool:
    return config.hedging_enabled and level >= config.hedge_start_level


def step_position(position: Position, new_price: float, config: SimulationConfig) -> PositionStepResult:
    """Mark one position to ``new_price`` and resolve win, loss or hold.

    The win test runs before the loss test. Margin-called and inactive
    positions are returned unchanged.
    """
    if not position.live:
        return PositionStepResult(position=position, outcome=Outcome.IDLE, level_before=position.level)

    require(new_price > 0, f"Non-positive market price {new_price}")
    require(position.entry_price > 0, f"{position.name}: non-positive entry price {position.entry_price}")
    require(position.level >= 1, f"{position.name}: invalid level {position.level}")

    level = position.level
    base = position.base_size
    notional = position_size(level, base)
    exposure_at_level = total_exposure(level, base)

    change = new_price - position.current_price
    pnl = position.pnl + position.direction.sign * change * notional / position.entry_price

    updated = replace(position, current_price=new_price, pnl=pnl, total_exposure=exposure_at_level)
    outcome = Outcome.HOLD
    broker_delta = 0.0
    payout = 0.0

    if is_win(pnl, base * config.win_threshold_multiplier, config.win_rule):
        gross = exposure_at_level + base
        protection = gross * config.hedge_ratio if hedge_protected(level, config) else 0.0
        payout = gross - protection
        broker_delta = -payout
        outcome = Outcome.WIN
        updated = replace(
            updated,
            level=1,
            pnl=0.0,
            entry_price=new_price,
            total_exposure=total_exposure(1, base),
        )
    elif pnl < loss_limit(level, base):
        if level >= config.intervention_level or exposure_at_level > config.max_client_exposure:
            broker_delta = exposure_at_level
            outcome = Outcome.MARGIN_CALL
            updated = replace(updated, active=False, margin_called=True)
        else:
            new_level = level + 1
            outcome = Outcome.ESCALATED
            updated = replace(
                updated,
                level=new_level,
                pnl=0.0,
                entry_price=new_price,
                total_exposure=total_exposure(new_level, base),
            )

    cost = hedge_cost(
        exposure=updated.total_exposure,
        level=updated.level,
        direction=updated.direction,
        market_price=new_price,
        volatility=config.volatility,
        hedge_start_level=config.hedge_start_level,
        hedge_ratio=config.hedge_ratio,
        strategy=config.hedge_strategy,
        hedging_enabled=config.hedging_enabled,
    )
    require(math.isfinite(cost) and cost >= 0, f"{position.name}: invalid hedging cost {cost}")
    require(updated.total_exposure >= 0, f"{position.name}: negative exposure {updated.total_exposure}")

    return PositionStepResult(
        position=updated,
        outcome=outcome,
        level_before=level,
        exposure=notional,
        broker_pnl_delta=broker_delta,
        hedging_cost=cost,
        payout=payout,
    )
