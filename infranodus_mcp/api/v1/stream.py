"""SSE channel endpoints: attach a consumer to a stream id, or cancel its run."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, AsyncIterator

from fastapi import APIRouter, Depends, HTTPException
from sse_starlette.sse import EventSourceResponse

from infranodus_mcp.api.dependencies import get_app_settings, get_hub, get_streams
from infranodus_mcp.config import Settings
from infranodus_mcp.services.sse_hub import SseHub
from infranodus_mcp.services.stream_service import StreamEvent, StreamRegistry
from infranodus_mcp.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/sse/stream", tags=["stream"])


async def channel_events(
    hub: SseHub,
    stream_id: str,
    queue: asyncio.Queue[StreamEvent | None],
    keepalive: float,
) -> AsyncIterator[dict[str, Any]]:
    """Yield SSE payloads for one attached channel until the hub closes it.

    The first event is ``connected``; a ``ping`` is sent whenever the channel
    has been idle for ``keepalive`` seconds. The channel is detached however
    the generator ends, including a client disconnect.
    """
    try:
        yield {
            "event": "connected",
            "data": json.dumps({
                "streamId": stream_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }),
        }
        while True:
            try:
                event = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield {"event": "ping", "data": ""}
                continue

            if event is None:
                return
            yield event.to_sse()
    finally:
        hub.detach(stream_id, queue)


@router.get("/{stream_id}")
async def stream_events(
    stream_id: str,
    hub: SseHub = Depends(get_hub),
    settings: Settings = Depends(get_app_settings),
) -> EventSourceResponse:
    """Pipe events published for ``stream_id`` to the client."""
    queue = hub.attach(stream_id)
    return EventSourceResponse(channel_events(hub, stream_id, queue, settings.SSE_KEEPALIVE_SECONDS))


@router.delete("/{stream_id}")
async def cancel_stream(
    stream_id: str,
    streams: StreamRegistry = Depends(get_streams),
) -> dict:
    """Flag a running progress stream as cancelled."""
    if not streams.cancel(stream_id):
        raise HTTPException(status_code=404, detail="Stream not found")
    logger.info("cancellation_signalled", stream_id=stream_id)
    return {"streamId": stream_id, "status": "cancelled"}
