from __future__ import annotations

import asyncio

import pytest

from war_room.config import RuntimeConfig
from war_room.engine import SimulationEngine
from war_room.errors import SimulationInvariantError
from war_room.monitoring import AlertFeed, AuditLog
from war_room.runtime import AsyncSimulationLoop, SafeModeController

FAST = RuntimeConfig(step_interval_seconds=0.001)


class BrokenEngine(SimulationEngine):
    def step(self):
        raise SimulationInvariantError("Client 1: negative exposure -1.0")


def test_loop_runs_requested_number_of_steps():
    engine = SimulationEngine(seed=4)
    engine.start()
    loop = AsyncSimulationLoop(engine, config=FAST)
    seen = []

    steps = asyncio.run(loop.run_forever(on_step=lambda result: seen.append(result.snapshot.step), max_steps=5))

    assert steps == 5
    assert seen == [1, 2, 3, 4, 5]
    assert engine.step_count == 5


def test_async_callback_is_awaited():
    engine = SimulationEngine(seed=4)
    engine.start()
    loop = AsyncSimulationLoop(engine, config=FAST)
    seen = []

    async def on_step(result):
        await asyncio.sleep(0)
        seen.append(result.snapshot.step)

    asyncio.run(loop.run_forever(on_step=on_step, max_steps=3))
    assert seen == [1, 2, 3]


def test_paused_engine_does_not_advance():
    engine = SimulationEngine(seed=4)
    loop = AsyncSimulationLoop(engine, config=FAST)

    async def runner() -> int:
        stop_event = asyncio.Event()
        task = asyncio.create_task(loop.run_forever(stop_event))
        await asyncio.sleep(0.05)
        stop_event.set()
        return await task

    assert asyncio.run(runner()) == 0
    assert engine.step_count == 0


def test_alerts_reach_feed_and_audit_log(tmp_path):
    engine = SimulationEngine(seed=4)
    engine.apply_protection_preset(4)
    engine.start()
    audit = AuditLog(tmp_path / "audit.log")
    feed = AlertFeed()
    loop = AsyncSimulationLoop(engine, config=FAST, feed=feed, audit_log=audit)

    asyncio.run(loop.run_forever(max_steps=1))

    assert feed.items()[0].message == "Applied High Protection - Conservative risk management"
    events = [record["event"] for record in audit.read()]
    assert events[0] == "loop_start"
    assert "alert" in events
    assert events[-1] == "loop_stop"


def test_invariant_failure_latches_safe_mode(tmp_path):
    engine = BrokenEngine(seed=4)
    engine.start()
    audit = AuditLog(tmp_path / "audit.log")
    safe_mode = SafeModeController(tmp_path / "safe_mode.json", audit_log=audit)
    loop = AsyncSimulationLoop(engine, config=FAST, safe_mode=safe_mode, audit_log=audit)

    with pytest.raises(SimulationInvariantError):
        asyncio.run(loop.run_forever(max_steps=3))

    assert safe_mode.enabled is True
    assert "negative exposure" in safe_mode.state.reason
    assert safe_mode.state.step == 1
    assert engine.step_count == 0
    assert engine.state.value == "idle"
    events = [record["event"] for record in audit.read()]
    assert "service_error" in events
    assert "safe_mode" in events


def test_loop_does_not_start_while_safe_mode_is_on():
    engine = SimulationEngine(seed=4)
    engine.start()
    safe_mode = SafeModeController()
    safe_mode.enable("left over")
    loop = AsyncSimulationLoop(engine, config=FAST, safe_mode=safe_mode)

    assert asyncio.run(loop.run_forever(max_steps=3)) == 0
    assert engine.step_count == 0
