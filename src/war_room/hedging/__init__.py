"""Hedging cost model."""

from war_room.hedging.pricing import LEVEL_GROWTH, atm_premium, hedge_cost, strategy_multiplier

__all__ = ["LEVEL_GROWTH", "atm_premium", "hedge_cost", "strategy_multiplier"]
