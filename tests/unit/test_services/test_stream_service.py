"""Unit tests for the progress streaming run and its registry."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from infranodus_mcp.models.graph import normalize_response
from infranodus_mcp.services.sse_hub import SseHub
from infranodus_mcp.services.stream_service import StreamEvent, StreamRegistry, run_progress
from infranodus_mcp.tools.request_policies import GraphQueryRequest
from infranodus_mcp.utils.exceptions import RemoteApiError, StreamConflictError, UpstreamDomainError

REQUEST = GraphQueryRequest("/graphAndAdvice", {"optimize": "gap"}, {"text": "hello"})


class Recorder:
    def __init__(self) -> None:
        self.events: list[StreamEvent] = []

    async def __call__(self, event: StreamEvent) -> None:
        self.events.append(event)


@pytest.mark.asyncio
async def test_full_run_emits_checkpoints_in_order(advice_payload):
    registry = StreamRegistry()
    send = AsyncMock(return_value=normalize_response(advice_payload))
    recorder = Recorder()

    outcome = await asyncio.wait_for(run_progress("s1", send, REQUEST, recorder, registry), timeout=2)

    messages = [e for e in recorder.events if e.event == "message"]
    assert [e.data["status"] for e in messages] == [
        "starting", "processing", "processing", "processing", "processing", "complete",
    ]
    assert [e.data.get("progress") for e in messages] == [None, 25, 50, 75, 90, 100]
    assert messages[-1].data["data"] == {"aiAdvice": advice_payload["aiAdvice"]}
    assert "data" not in messages[0].data

    terminal = recorder.events[-1]
    assert terminal.event == "complete"
    assert terminal.data == {"streamId": "s1"}
    assert terminal.id == "s1-complete"
    assert [e.id for e in messages] == ["s1-1", "s1-2", "s1-3", "s1-4", "s1-5", "s1-6"]

    send.assert_awaited_once_with("/graphAndAdvice?optimize=gap", {"text": "hello"})
    assert outcome.response is not None
    assert outcome.cancelled is False
    assert outcome.events == recorder.events
    assert "s1" not in registry


@pytest.mark.asyncio
async def test_gateway_called_after_third_progress_checkpoint(advice_payload):
    registry = StreamRegistry()
    recorder = Recorder()
    seen_before_call: list[int] = []

    async def send(path, body):
        seen_before_call.append(len(recorder.events))
        return normalize_response(advice_payload)

    await run_progress("s1", send, REQUEST, recorder, registry)

    assert seen_before_call == [4]


@pytest.mark.asyncio
async def test_cancel_after_first_event_skips_gateway():
    registry = StreamRegistry()
    send = AsyncMock()
    events: list[StreamEvent] = []

    async def emit(event: StreamEvent) -> None:
        events.append(event)
        if event.data.get("status") == "starting":
            registry.cancel("s1")

    outcome = await asyncio.wait_for(run_progress("s1", send, REQUEST, emit, registry), timeout=2)

    assert [e.event for e in events] == ["message", "complete"]
    assert events[-1].data == {"streamId": "s1", "cancelled": True}
    assert outcome.cancelled is True
    assert outcome.response is None
    send.assert_not_awaited()
    assert "s1" not in registry


@pytest.mark.asyncio
async def test_cancel_before_gateway_call_makes_zero_calls():
    registry = StreamRegistry()
    send = AsyncMock()

    async def emit(event: StreamEvent) -> None:
        if event.data.get("progress") == 75:
            registry.cancel("s1")

    outcome = await run_progress("s1", send, REQUEST, emit, registry)

    assert outcome.cancelled is True
    send.assert_not_awaited()


@pytest.mark.asyncio
async def test_gateway_error_emits_terminal_error_and_reraises():
    registry = StreamRegistry()
    send = AsyncMock(side_effect=RemoteApiError(500, "boom"))
    recorder = Recorder()

    with pytest.raises(RemoteApiError):
        await run_progress("s1", send, REQUEST, recorder, registry)

    terminal = recorder.events[-1]
    assert terminal.event == "error"
    assert terminal.is_terminal
    assert terminal.data == {"error": "API request failed (500): boom"}
    assert [e.event for e in recorder.events].count("complete") == 0
    assert "s1" not in registry


@pytest.mark.asyncio
async def test_upstream_error_field_ends_stream_with_error():
    registry = StreamRegistry()
    send = AsyncMock(return_value=normalize_response({"error": "Quota exceeded"}))
    recorder = Recorder()

    with pytest.raises(UpstreamDomainError, match="Quota exceeded"):
        await run_progress("s1", send, REQUEST, recorder, registry)

    terminal = recorder.events[-1]
    assert terminal.event == "error"
    assert terminal.data == {"error": "Quota exceeded"}
    assert terminal.id == "s1-error"
    assert all(e.event != "complete" for e in recorder.events)
    assert all(e.data.get("progress") != 90 for e in recorder.events)
    assert "s1" not in registry


@pytest.mark.asyncio
async def test_task_cancellation_ends_stream_as_cancelled():
    registry = StreamRegistry()
    recorder = Recorder()
    called = asyncio.Event()

    async def send(path, body):
        called.set()
        await asyncio.Event().wait()

    task = asyncio.create_task(run_progress("s1", send, REQUEST, recorder, registry))
    await asyncio.wait_for(called.wait(), timeout=2)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    terminal = recorder.events[-1]
    assert terminal.event == "complete"
    assert terminal.data == {"streamId": "s1", "cancelled": True}
    assert "s1" not in registry


@pytest.mark.asyncio
async def test_running_stream_id_conflicts():
    registry = StreamRegistry()
    registry.start("s1")

    with pytest.raises(StreamConflictError):
        await run_progress("s1", AsyncMock(), REQUEST, Recorder(), registry)

    assert registry.is_active("s1")


def test_registry_cancel_is_one_way():
    registry = StreamRegistry()

    assert registry.start("s1") is True
    assert registry.start("s1") is False
    assert registry.is_active("s1")
    assert registry.cancel("s1") is True
    assert not registry.is_active("s1")
    assert registry.start("s1") is False
    assert not registry.is_active("s1")
    assert registry.cancel("unknown") is False
    assert len(registry) == 1

    registry.remove("s1")
    assert len(registry) == 0


def test_stream_event_to_sse():
    event = StreamEvent("message", {"status": "starting"}, "s1-1")
    assert event.to_sse() == {"event": "message", "data": '{"status": "starting"}', "id": "s1-1"}
    assert not event.is_terminal


@pytest.mark.asyncio
async def test_hub_publish_requires_attached_consumer():
    hub = SseHub()
    event = StreamEvent("message", {"status": "starting"}, "s1-1")

    assert await hub.publish("s1", event) is False

    queue = hub.attach("s1")
    assert await hub.publish("s1", event) is True
    assert queue.get_nowait() is event


@pytest.mark.asyncio
async def test_hub_detach_ignores_replaced_queue():
    hub = SseHub()
    stale = hub.attach("s1")
    current = hub.attach("s1")

    hub.detach("s1", stale)
    assert hub.is_attached("s1")

    hub.detach("s1", current)
    assert not hub.is_attached("s1")


@pytest.mark.asyncio
async def test_hub_close_all_sends_shutdown_then_sentinel():
    hub = SseHub()
    queue = hub.attach("s1")

    await hub.close_all()

    assert queue.get_nowait().event == "shutdown"
    assert queue.get_nowait() is None
    assert len(hub) == 0
