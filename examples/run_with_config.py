import random
from pathlib import Path

from war_room.config import load_config
from war_room.engine import SimulationEngine

config_path = Path("configs") / "war_room.yaml"
config = load_config(config_path)

engine = SimulationEngine(config.simulation, rng=random.Random(42))
for _ in range(100):
    engine.step()

snapshot = engine.snapshot()
print("Config:", config.name, config.version)
print("Protection level:", engine.config.protection_level)
print("Net P&L:", round(snapshot.net_pnl, 2))
print("Peak P&L:", round(snapshot.peak_pnl, 2))
print("History points:", len(snapshot.history))
