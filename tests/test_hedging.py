import math

import pytest

from war_room.config import HedgeStrategy
from war_room.hedging import LEVEL_GROWTH, atm_premium, hedge_cost, strategy_multiplier
from war_room.positions import Direction


def _cost(**kwargs):
    values = {
        "exposure": 70_000.0,
        "level": 3,
        "direction": Direction.LONG,
        "market_price": 1.0850,
        "volatility": 0.0012,
        "hedge_start_level": 3,
        "hedge_ratio": 0.7,
        "strategy": HedgeStrategy.DYNAMIC,
    }
    values.update(kwargs)
    return hedge_cost(**values)


def test_no_cost_below_start_level_or_when_disabled():
    assert _cost(level=2) == 0.0
    assert _cost(hedging_enabled=False) == 0.0
    assert _cost(level=1, hedge_start_level=2) == 0.0


def test_cost_is_positive_from_start_level():
    assert _cost() > 0
    assert _cost(level=4, exposure=150_000.0) > _cost()


def test_strategy_multipliers():
    assert strategy_multiplier(HedgeStrategy.CALLS, Direction.SHORT) == 1.2
    assert strategy_multiplier(HedgeStrategy.CALLS, Direction.LONG) == 0.8
    assert strategy_multiplier(HedgeStrategy.PUTS, Direction.LONG) == 1.2
    assert strategy_multiplier(HedgeStrategy.PUTS, Direction.SHORT) == 0.8
    assert strategy_multiplier(HedgeStrategy.COLLARS, Direction.LONG) == 0.6
    assert strategy_multiplier(HedgeStrategy.COLLARS, Direction.SHORT) == 0.6
    assert strategy_multiplier(HedgeStrategy.DYNAMIC, Direction.LONG) == 1.0
    assert strategy_multiplier(HedgeStrategy.DYNAMIC, Direction.SHORT) == 1.0


def test_strategy_scales_cost():
    dynamic = _cost()
    assert _cost(strategy=HedgeStrategy.PUTS) == pytest.approx(dynamic * 1.2)
    assert _cost(strategy=HedgeStrategy.CALLS) == pytest.approx(dynamic * 0.8)
    assert _cost(strategy=HedgeStrategy.COLLARS) == pytest.approx(dynamic * 0.6)


def test_each_level_above_start_grows_cost_by_thirty_percent():
    at_start = _cost(level=3)
    two_above = _cost(level=5)
    assert two_above == pytest.approx(at_start * LEVEL_GROWTH**2)
    assert two_above / at_start == pytest.approx(1.69)


def test_cost_is_linear_in_exposure_and_ratio():
    assert _cost(exposure=140_000.0) == pytest.approx(_cost() * 2)
    assert _cost(hedge_ratio=0.35) == pytest.approx(_cost() / 2)
    assert _cost(hedge_ratio=0.0) == 0.0


def test_premium_matches_closed_form():
    annual_vol = 0.0012 * math.sqrt(252)
    d1 = (0.05 + 0.5 * annual_vol**2) * 0.083 / (annual_vol * math.sqrt(0.083))
    expected = 1.0850 * 0.4 * math.sqrt(0.083 / (2 * math.pi)) * math.exp(-0.5 * d1 * d1)
    assert atm_premium(1.0850, 0.0012) == pytest.approx(expected)


def test_cost_is_deterministic():
    assert _cost() == _cost()


def test_cost_is_finite_and_non_negative_across_inputs():
    for strategy in HedgeStrategy:
        for direction in Direction:
            for price in (0.5, 1.0850, 1.5):
                for volatility in (0.0005, 0.0036, 0.03):
                    for level in range(1, 9):
                        cost = _cost(
                            exposure=10_000.0 * (2**level - 1),
                            level=level,
                            direction=direction,
                            market_price=price,
                            volatility=volatility,
                            hedge_start_level=2,
                            strategy=strategy,
                        )
                        assert math.isfinite(cost)
                        assert cost >= 0
