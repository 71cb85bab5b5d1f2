"""Market price process."""

from war_room.market.price import (
    GAP_SIZE,
    GAP_TRIGGER,
    PRICE_FLOOR,
    MarketState,
    PriceMove,
    effective_volatility,
    next_price,
)

__all__ = [
    "GAP_SIZE",
    "GAP_TRIGGER",
    "PRICE_FLOOR",
    "MarketState",
    "PriceMove",
    "effective_volatility",
    "next_price",
]
