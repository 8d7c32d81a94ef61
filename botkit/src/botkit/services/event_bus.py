"""
Simple in-memory event bus decoupling event producers (market data,
order updates, timers) from the runner that feeds a strategy.  Each
topic has its own asyncio queue, so items on one topic are consumed
strictly in the order they were published.

Synchronous code such as a strategy host callback cannot ``await``;
it uses :meth:`EventBus.publish_nowait` or schedules that call on the
event loop instead.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, AsyncIterator, Dict


class EventBus:
    """In-memory topic -> FIFO queue bus."""

    def __init__(self) -> None:
        self._queues: Dict[str, asyncio.Queue] = defaultdict(asyncio.Queue)

    async def publish(self, topic: str, data: Any) -> None:
        """Publish an item to the given topic."""
        await self._queues[topic].put(data)

    def publish_nowait(self, topic: str, data: Any) -> None:
        """Publish without awaiting; queues are unbounded so this never blocks."""
        self._queues[topic].put_nowait(data)

    def pending(self, topic: str) -> int:
        return self._queues[topic].qsize()

    async def subscribe(self, topic: str) -> AsyncIterator[Any]:
        """Yield items of a topic as they arrive."""
        queue = self._queues[topic]
        while True:
            data = await queue.get()
            yield data
