import pytest

from war_room.config import HedgeStrategy, SimulationConfig, WinRule
from war_room.errors import SimulationInvariantError
from war_room.hedging import hedge_cost
from war_room.positions import Direction, Outcome, Position, step_position, total_exposure


def _position(level=1, direction=Direction.LONG, pnl=0.0, entry=1.0850, current=1.0850, base=10_000.0, **kwargs):
    return Position(
        client_id=1,
        name="Client 1",
        direction=direction,
        base_size=base,
        level=level,
        entry_price=entry,
        current_price=current,
        total_exposure=total_exposure(level, base),
        pnl=pnl,
        **kwargs,
    )


def _take_profit_config(**kwargs):
    values = {"intervention_level": 5, "win_rule": WinRule.TAKE_PROFIT, "hedging_enabled": False}
    values.update(kwargs)
    return SimulationConfig(**values)


def test_loss_at_level_one_escalates_to_level_two():
    result = step_position(_position(), 1.0850 - 0.55, _take_profit_config())

    assert result.outcome == Outcome.ESCALATED
    assert result.position.level == 2
    assert result.position.total_exposure == 30_000
    assert result.position.pnl == 0.0
    assert result.position.entry_price == 1.0850 - 0.55
    assert result.broker_pnl_delta == 0.0


def test_loss_threshold_is_strict():
    # A P&L of exactly -5,000 holds. The loss rule is a strict "<", which
    # contradicts the worked example that has -5,000 escalating.
    config = _take_profit_config()

    at_limit = step_position(_position(pnl=-5_000.0), 1.0850, config)
    assert at_limit.outcome == Outcome.HOLD
    assert at_limit.position.level == 1

    beyond = step_position(_position(pnl=-5_000.01), 1.0850, config)
    assert beyond.outcome == Outcome.ESCALATED
    assert beyond.position.level == 2


def test_level_seven_loss_past_intervention_is_margin_called():
    result = step_position(_position(level=7), 1.0850 - 0.55, _take_profit_config())

    assert result.outcome == Outcome.MARGIN_CALL
    assert result.broker_pnl_delta == 1_270_000
    assert result.position.active is False
    assert result.position.margin_called is True
    assert result.position.level == 7
    assert result.position.total_exposure == 1_270_000


def test_margin_called_position_is_terminal():
    config = _take_profit_config()
    called = step_position(_position(level=7), 1.0850 - 0.55, config).position

    for price in (1.2, 0.6, 1.0850, 2.0):
        result = step_position(called, price, config)
        assert result.outcome == Outcome.IDLE
        assert result.position is called
        assert result.broker_pnl_delta == 0.0
        assert result.hedging_cost == 0.0


def test_exposure_cap_triggers_margin_call_below_intervention_level():
    config = _take_profit_config(max_client_exposure=50_000)
    result = step_position(_position(level=3), 1.0850 - 0.55, config)

    assert result.outcome == Outcome.MARGIN_CALL
    assert result.broker_pnl_delta == 70_000


def test_symmetric_rule_counts_large_adverse_move_as_win():
    config = SimulationConfig()
    result = step_position(_position(), 1.0850 - 0.0200, config)

    assert result.outcome == Outcome.WIN
    assert result.broker_pnl_delta == -20_000
    assert result.payout == 20_000
    assert result.position.level == 1
    assert result.position.pnl == 0.0
    assert result.position.entry_price == 1.0850 - 0.0200


def test_take_profit_rule_holds_on_adverse_move():
    result = step_position(_position(), 1.0850 - 0.0200, _take_profit_config())

    assert result.outcome == Outcome.HOLD
    assert result.position.pnl == pytest.approx(-0.02 * 10_000 / 1.0850)
    assert result.position.current_price == 1.0850 - 0.0200
    assert result.position.entry_price == 1.0850


def test_win_above_hedge_start_is_partly_protected():
    config = SimulationConfig(hedge_ratio=0.7, hedge_start_level=3)
    result = step_position(_position(level=4, direction=Direction.SHORT), 1.0850 - 0.0200, config)

    assert result.outcome == Outcome.WIN
    assert result.payout == pytest.approx((150_000 + 10_000) * 0.3)
    assert result.broker_pnl_delta == pytest.approx(-48_000)
    assert result.position.level == 1
    assert result.hedging_cost == 0.0


def test_force_wins_lowers_threshold():
    position = _position()
    price = 1.0850 + 0.004

    normal = step_position(position, price, _take_profit_config())
    forced = step_position(position, price, _take_profit_config(force_wins_mode=True))

    assert normal.outcome == Outcome.HOLD
    assert forced.outcome == Outcome.WIN


def test_short_position_gains_when_price_falls():
    config = _take_profit_config()
    result = step_position(_position(direction=Direction.SHORT), 1.0850 - 0.0005, config)
    assert result.outcome == Outcome.HOLD
    assert result.position.pnl > 0


def test_escalation_into_hedged_level_adds_hedge_cost():
    config = _take_profit_config(hedging_enabled=True, hedge_start_level=2, hedge_strategy=HedgeStrategy.PUTS)
    new_price = 1.0850 - 0.55
    result = step_position(_position(), new_price, config)

    expected = hedge_cost(
        exposure=30_000,
        level=2,
        direction=Direction.LONG,
        market_price=new_price,
        volatility=config.volatility,
        hedge_start_level=2,
        hedge_ratio=config.hedge_ratio,
        strategy=HedgeStrategy.PUTS,
    )
    assert result.outcome == Outcome.ESCALATED
    assert result.hedging_cost == expected
    assert result.hedging_cost > 0


def test_hold_reports_current_level_notional():
    result = step_position(_position(level=3), 1.0851, _take_profit_config())
    assert result.outcome == Outcome.HOLD
    assert result.exposure == 40_000
    assert result.position.total_exposure == 70_000


def test_inactive_position_is_skipped():
    position = _position(active=False)
    result = step_position(position, 0.9, SimulationConfig())
    assert result.outcome == Outcome.IDLE
    assert result.position is position
    assert result.exposure == 0.0


def test_non_positive_entry_price_fails_loudly():
    with pytest.raises(SimulationInvariantError):
        step_position(_position(entry=0.0), 1.0850, SimulationConfig())
