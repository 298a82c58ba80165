"""Registry of attached SSE consumers, one queue per stream id."""

from __future__ import annotations

import asyncio

from infranodus_mcp.services.stream_service import StreamEvent
from infranodus_mcp.utils.logging import get_logger

logger = get_logger(__name__)


class SseHub:
    """Stream id -> output queue.

    Events for one channel are serialized through its queue; channels are
    independent of each other. ``None`` on a queue tells the consumer to close.
    """

    def __init__(self) -> None:
        self._channels: dict[str, asyncio.Queue[StreamEvent | None]] = {}

    def attach(self, stream_id: str) -> asyncio.Queue[StreamEvent | None]:
        queue: asyncio.Queue[StreamEvent | None] = asyncio.Queue()
        self._channels[stream_id] = queue
        logger.info("sse_client_attached", stream_id=stream_id)
        return queue

    def detach(self, stream_id: str, queue: asyncio.Queue[StreamEvent | None]) -> None:
        # A reconnect may already have replaced the queue for this id.
        if self._channels.get(stream_id) is queue:
            del self._channels[stream_id]
            logger.info("sse_client_detached", stream_id=stream_id)

    def is_attached(self, stream_id: str) -> bool:
        return stream_id in self._channels

    async def publish(self, stream_id: str, event: StreamEvent) -> bool:
        queue = self._channels.get(stream_id)
        if queue is None:
            return False
        await queue.put(event)
        return True

    async def close_all(self) -> None:
        for stream_id, queue in list(self._channels.items()):
            await queue.put(StreamEvent("shutdown", {"message": "Server shutting down"}, f"{stream_id}-shutdown"))
            await queue.put(None)
        self._channels.clear()

    def __len__(self) -> int:
        return len(self._channels)
