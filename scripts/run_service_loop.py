from __future__ import annotations

import argparse
import asyncio
import random
from datetime import datetime, timezone
from pathlib import Path

from war_room.config import compute_config_hash, load_config
from war_room.engine import SimulationEngine
from war_room.engine.engine import StepResult
from war_room.monitoring import AlertFeed, AuditLog, LogNotifier, Monitor
from war_room.runtime import AsyncSimulationLoop, SafeModeController


def _print_status(result: StepResult) -> None:
    snapshot = result.snapshot
    live = sum(1 for position in result.positions if position.live)
    print(
        f"step={snapshot.step} price={snapshot.price:.5f} net={snapshot.net_pnl:,.0f} "
        f"exposure={snapshot.total_exposure:,.0f} live_clients={live}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Step the simulation on its configured cadence.")
    parser.add_argument("--config", default="configs/war_room.yaml")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-steps", type=int, default=None)
    parser.add_argument("--clear-safe", action="store_true")
    args = parser.parse_args()

    config_path = Path(args.config)
    config = load_config(config_path)
    config_hash = compute_config_hash(config_path)
    run_id = f"{config.name}-{datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%SZ')}-{config_hash[:8]}"

    monitor = Monitor(LogNotifier())
    audit = None
    if config.monitoring.audit_log_path:
        audit = AuditLog(Path(config.monitoring.audit_log_path), run_id=run_id, config_hash=config_hash)
        audit.log("run_start", {"config": str(config_path)})

    safe_mode = SafeModeController(
        config.runtime.safe_mode_path,
        latched=config.runtime.safe_mode_latched,
        monitor=monitor,
        audit_log=audit,
    )
    if args.clear_safe:
        safe_mode.clear("manual_clear")
    if safe_mode.enabled:
        raise RuntimeError(f"Safe mode active: {safe_mode.state.reason}; rerun with --clear-safe")

    engine = SimulationEngine(config.simulation, rng=random.Random(args.seed))
    loop = AsyncSimulationLoop(
        engine,
        config=config.runtime,
        monitor=monitor,
        feed=AlertFeed(config.monitoring.alert_capacity),
        safe_mode=safe_mode,
        audit_log=audit,
    )
    engine.start()
    try:
        asyncio.run(loop.run_forever(on_step=_print_status, max_steps=args.max_steps))
    except KeyboardInterrupt:
        engine.pause()
        print("Stopped")


if __name__ == "__main__":
    main()
