from __future__ import annotations

import argparse
import json
import random
from dataclasses import asdict, replace
from datetime import datetime, timezone
from pathlib import Path

from war_room.config import compute_config_hash, load_config, serialize_config
from war_room.engine import SimulationEngine, StressScenario
from war_room.monitoring import AlertFeed, AuditLog, LogNotifier, Monitor
from war_room.risk import Severity


def _serialize_history(history):
    return [asdict(point) for point in history]


def _serialize_positions(positions):
    payload = []
    for position in positions:
        item = asdict(position)
        item["direction"] = position.direction.value
        payload.append(item)
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a headless martingale war room simulation.")
    parser.add_argument("--config", default="configs/war_room.yaml")
    parser.add_argument("--steps", type=int, default=200)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--preset", type=int, choices=range(1, 6), default=None)
    parser.add_argument("--scenario", choices=[item.value for item in StressScenario], default=None)
    parser.add_argument("--output", default=None)
    parser.add_argument("--quiet", action="store_true", help="Only print danger alerts")
    args = parser.parse_args()

    config_path = Path(args.config)
    config = load_config(config_path)
    config_hash = compute_config_hash(config_path)
    started_at = datetime.now(timezone.utc)
    run_id = f"{config.name}-{started_at.strftime('%Y%m%dT%H%M%SZ')}-{config_hash[:8]}"

    monitor = Monitor(LogNotifier(), min_severity=Severity.DANGER if args.quiet else Severity.INFO)
    feed = AlertFeed(config.monitoring.alert_capacity)
    audit = None
    if config.monitoring.audit_log_path:
        audit = AuditLog(config.monitoring.audit_log_path, run_id=run_id, config_hash=config_hash)
        audit.log("run_start", {"config": str(config_path), "steps": args.steps, "seed": args.seed})

    engine = SimulationEngine(config.simulation, rng=random.Random(args.seed))
    if args.preset is not None:
        engine.apply_protection_preset(args.preset)
    if args.scenario is not None:
        engine.load_scenario(args.scenario)

    for _ in range(args.steps):
        result = engine.step()
        feed.extend(result.alerts)
        monitor.alerts(result.alerts)
        if audit is not None:
            audit.log_alerts(result.alerts)

    snapshot = engine.snapshot()
    margin_calls = sum(1 for position in engine.positions if position.margin_called)
    print(
        f"steps={snapshot.step} price={snapshot.price:.5f} net_pnl={snapshot.net_pnl:,.2f} "
        f"hedging_cost={snapshot.hedging_cost:,.2f} peak={snapshot.peak_pnl:,.2f} "
        f"max_drawdown={snapshot.max_drawdown:,.2f} margin_calls={margin_calls}"
    )

    if audit is not None:
        audit.log("run_stop", {"step": snapshot.step, "net_pnl": snapshot.net_pnl})

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "run_id": run_id,
            "config": serialize_config(config),
            "effective_simulation": serialize_config(replace(config, simulation=engine.config))["simulation"],
            "snapshot": {
                "step": snapshot.step,
                "price": snapshot.price,
                "broker_pnl": snapshot.broker_pnl,
                "hedging_cost": snapshot.hedging_cost,
                "net_pnl": snapshot.net_pnl,
                "total_exposure": snapshot.total_exposure,
                "peak_pnl": snapshot.peak_pnl,
                "max_drawdown": snapshot.max_drawdown,
            },
            "history": _serialize_history(snapshot.history),
            "positions": _serialize_positions(engine.positions),
            "recent_alerts": [
                {"step": alert.step, "severity": alert.severity.value, "message": alert.message}
                for alert in feed.items()
            ],
        }
        output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Report written to {output_path}")


if __name__ == "__main__":
    main()
