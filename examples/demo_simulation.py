import random

from war_room.config import HedgeStrategy, SimulationConfig
from war_room.engine import SimulationEngine, StressScenario
from war_room.monitoring import AlertFeed

config = SimulationConfig(volatility=0.0020, hedge_strategy=HedgeStrategy.PUTS)
engine = SimulationEngine(config, rng=random.Random(7))
feed = AlertFeed()

preset = engine.apply_protection_preset(4)
print("Preset:", preset.name, preset.intervention_level, preset.hedge_ratio)

for _ in range(50):
    result = engine.step()
    feed.extend(result.alerts)

snapshot = engine.snapshot()
print("Step:", snapshot.step)
print("Price:", round(snapshot.price, 5))
print("Net P&L:", round(snapshot.net_pnl, 2))
print("Hedging cost:", round(snapshot.hedging_cost, 2))
print("Max drawdown:", round(snapshot.max_drawdown, 2))

engine.load_scenario(StressScenario.BLACK_SWAN)
for _ in range(50):
    feed.extend(engine.step().alerts)

print("Margin calls:", sum(1 for position in engine.positions if position.margin_called))
for alert in feed.items():
    print(f"[{alert.severity.value}] step {alert.step}: {alert.message}")
