import asyncio

import pytest

from botkit.services.event_bus import EventBus


@pytest.mark.asyncio
async def test_topics_are_fifo_and_independent() -> None:
    bus = EventBus()
    await bus.publish("a", 1)
    bus.publish_nowait("b", "x")
    await bus.publish("a", 2)
    assert bus.pending("a") == 2
    assert bus.pending("b") == 1

    received = []

    async def consume() -> None:
        async for item in bus.subscribe("a"):
            received.append(item)
            if len(received) == 2:
                break

    await asyncio.wait_for(consume(), 1.0)
    assert received == [1, 2]
    assert bus.pending("b") == 1
