"""Unit tests for the SSE channel generator behind ``/sse/stream/{id}``."""

from __future__ import annotations

import asyncio
import json

import pytest

from infranodus_mcp.api.v1.stream import channel_events
from infranodus_mcp.services.sse_hub import SseHub
from infranodus_mcp.services.stream_service import StreamEvent


@pytest.mark.asyncio
async def test_connected_first_then_ping_when_idle():
    hub = SseHub()
    queue = hub.attach("s1")
    events = channel_events(hub, "s1", queue, keepalive=0.01)

    first = await events.__anext__()
    assert first["event"] == "connected"
    assert json.loads(first["data"])["streamId"] == "s1"

    assert await events.__anext__() == {"event": "ping", "data": ""}

    await events.aclose()
    assert not hub.is_attached("s1")


@pytest.mark.asyncio
async def test_forwards_published_events_until_closed():
    hub = SseHub()
    queue = hub.attach("s1")
    event = StreamEvent("message", {"status": "starting"}, "s1-1")
    await hub.publish("s1", event)
    await queue.put(None)

    collected = [item async for item in channel_events(hub, "s1", queue, keepalive=5)]

    assert [item["event"] for item in collected] == ["connected", "message"]
    assert collected[1] == event.to_sse()
    assert len(hub) == 0


@pytest.mark.asyncio
async def test_disconnect_detaches_channel():
    hub = SseHub()
    queue = hub.attach("s1")

    async def consume():
        async for _ in channel_events(hub, "s1", queue, keepalive=5):
            pass

    task = asyncio.create_task(consume())
    await asyncio.sleep(0.05)
    assert hub.is_attached("s1")

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert not hub.is_attached("s1")
