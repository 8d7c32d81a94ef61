"""
Strategy runner.

The runner is the host event loop for a single strategy instance.  It
calls ``on_start``, then consumes one event-bus topic and dispatches
every item to the strategy, one at a time and to completion:

* event models (or raw event dicts, normalised first) go to ``on_event``;
* :class:`TimerFired` envelopes go to ``on_timer``.

Timers registered by the strategy through ``set_interval`` are driven
by background tasks that publish :class:`TimerFired` onto the same
topic, so timer ticks and events are serialised and no two callbacks
ever overlap.

The run ends when the strategy requests its own termination or when
:meth:`StrategyRunner.shutdown` is called; ``on_stop`` is then invoked
once.  A strategy that asks to stop from ``on_start`` never traded, so
no ``on_stop`` follows in that case.

In paper mode every order the strategy places is answered with an
``OrderCompleted`` event after ``fill_delay`` seconds.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from . import telemetry
from .clients.paper_exchange import PaperContext
from .models import PlaceOrder
from .models_events import normalize_event
from .services.event_bus import EventBus
from .strategies.base import BaseStrategy

logger = logging.getLogger(__name__)

_SHUTDOWN = object()


@dataclass(frozen=True)
class TimerFired:
    timer_id: int


class StrategyRunner:
    """Drive one strategy from an event-bus topic."""

    def __init__(
        self,
        strategy: BaseStrategy,
        context: PaperContext,
        event_bus: Optional[EventBus] = None,
        topic: str = "strategy",
        paper_fills: bool = False,
        fill_delay: float = 0.1,
    ) -> None:
        self.strategy = strategy
        self.context = context
        self.event_bus = event_bus or EventBus()
        self.topic = topic
        self.fill_delay = fill_delay
        if not context.strategy_id:
            context.strategy_id = strategy.strategy_id
        if paper_fills:
            context.on_order = self._schedule_paper_fill
        self._timer_tasks: List[asyncio.Task] = []
        self._fill_handles: List[asyncio.TimerHandle] = []
        self.started = False
        self.stopped = False

    async def publish(self, event: Any) -> None:
        """Queue an event (model or raw dict) for the strategy."""
        await self.event_bus.publish(self.topic, event)

    def shutdown(self) -> None:
        """Ask the run loop to stop after the items already queued."""
        self.event_bus.publish_nowait(self.topic, _SHUTDOWN)

    async def run(self) -> None:
        strategy, ctx = self.strategy, self.context
        logger.info("Starting strategy %s (%s)", strategy.strategy_id, type(strategy).__name__)
        strategy.on_start(ctx)
        if ctx.stop_requested:
            logger.error("Strategy %s failed to start: %s", strategy.strategy_id, ctx.stop_requests[-1][1])
            return
        self.started = True
        self._timer_tasks = [
            asyncio.create_task(self._tick(timer_id, period)) for timer_id, period in ctx.timers.items()
        ]
        try:
            async for item in self.event_bus.subscribe(self.topic):
                if item is _SHUTDOWN:
                    break
                self._dispatch(item)
                if ctx.stop_requested:
                    logger.warning("Strategy %s requested stop: %s", strategy.strategy_id, ctx.stop_requests[-1][1])
                    break
        finally:
            for task in self._timer_tasks:
                task.cancel()
            for handle in self._fill_handles:
                handle.cancel()
            self._timer_tasks = []
            self._fill_handles = []
            strategy.on_stop(ctx)
            self.stopped = True
            logger.info("Strategy %s stopped", strategy.strategy_id)

    def _dispatch(self, item: Any) -> None:
        if isinstance(item, TimerFired):
            telemetry.EVENTS_DISPATCHED.labels(kind="timer").inc()
            self.strategy.on_timer(self.context, item.timer_id)
            return
        try:
            event = normalize_event(item)
        except ValueError as exc:
            logger.warning("Dropping malformed event: %s", exc)
            return
        telemetry.EVENTS_DISPATCHED.labels(kind=event.kind).inc()
        self.strategy.on_event(self.context, event)

    async def _tick(self, timer_id: int, period: float) -> None:
        while True:
            await asyncio.sleep(period)
            await self.event_bus.publish(self.topic, TimerFired(timer_id))

    def _schedule_paper_fill(self, order: PlaceOrder) -> None:
        event = self.context.complete(order.client_id)
        loop = asyncio.get_running_loop()
        handle = loop.call_later(self.fill_delay, self.event_bus.publish_nowait, self.topic, event)
        # Drop handles that already fired.
        now = loop.time()
        self._fill_handles = [h for h in self._fill_handles if h.when() > now]
        self._fill_handles.append(handle)
