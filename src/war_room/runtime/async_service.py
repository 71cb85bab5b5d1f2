"""Asyncio host loop stepping the engine on a fixed cadence."""

from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Callable, Optional

from war_room.config.models import RuntimeConfig
from war_room.engine.engine import EngineState, SimulationEngine, StepResult
from war_room.errors import SimulationInvariantError
from war_room.monitoring.audit import AuditLog
from war_room.monitoring.feed import AlertFeed
from war_room.monitoring.monitor import Monitor
from war_room.runtime.safe_mode import SafeModeController

StepCallback = Callable[[StepResult], Awaitable[None] | None]


class AsyncSimulationLoop:
    """Runs at most one ``step`` at a time on a single task.

    The loop only advances the engine while it is ``RUNNING``; pausing the
    engine leaves the loop idling until it is started again or stopped.
    """

    def __init__(
        self,
        engine: SimulationEngine,
        config: Optional[RuntimeConfig] = None,
        monitor: Optional[Monitor] = None,
        feed: Optional[AlertFeed] = None,
        safe_mode: Optional[SafeModeController] = None,
        audit_log: Optional[AuditLog] = None,
    ) -> None:
        self.engine = engine
        self.config = config or RuntimeConfig()
        self.monitor = monitor
        self.feed = feed if feed is not None else AlertFeed()
        self.safe_mode = safe_mode
        self._audit_log = audit_log

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)

    async def _maybe_call(self, callback: StepCallback | None, result: StepResult) -> None:
        if callback is None:
            return
        outcome = callback(result)
        if inspect.isawaitable(outcome):
            await outcome

    def step_once(self) -> StepResult:
        result = self.engine.step()
        self.feed.extend(result.alerts)
        if self.monitor is not None:
            self.monitor.alerts(result.alerts)
        if self._audit_log is not None:
            self._audit_log.log_alerts(result.alerts)
        return result

    async def run_forever(
        self,
        stop_event: Optional[asyncio.Event] = None,
        on_step: StepCallback | None = None,
        max_steps: Optional[int] = None,
    ) -> int:
        if stop_event is None:
            stop_event = asyncio.Event()

        loop = asyncio.get_running_loop()
        interval = self.config.step_interval_seconds
        steps = 0
        self._log("loop_start", {"interval": interval, "max_steps": max_steps})

        while not stop_event.is_set():
            if self.safe_mode is not None and self.safe_mode.enabled:
                break
            start = loop.time()
            if self.engine.state == EngineState.RUNNING:
                try:
                    result = self.step_once()
                except SimulationInvariantError as exc:
                    failed_step = self.engine.step_count + 1
                    self.engine.pause()
                    self._log("service_error", {"step": failed_step, "error": str(exc)})
                    if self.safe_mode is not None:
                        self.safe_mode.enable(f"Simulation invariant violated: {exc}", step=failed_step)
                    raise
                steps += 1
                await self._maybe_call(on_step, result)
                if max_steps is not None and steps >= max_steps:
                    break
            elapsed = loop.time() - start
            delay = max(0.0, interval - elapsed)
            if delay:
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=delay)
                except asyncio.TimeoutError:
                    pass

        self._log("loop_stop", {"steps": steps, "step_count": self.engine.step_count})
        return steps
