"""Progress streaming around the single InfraNodus call.

A run walks ``PROGRESS_PLAN`` in order. Each checkpoint becomes one ``message``
event; the one gateway call sits at a fixed position in the plan. Cancellation
is cooperative: the liveness flag is checked before every step, and a run
always finishes with a terminal ``complete`` or ``error`` event.
"""

from __future__ import annotations

import asyncio
import itertools
import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from infranodus_mcp.models.graph import GraphResponse
from infranodus_mcp.tools.request_policies import GraphQueryRequest
from infranodus_mcp.utils.exceptions import StreamConflictError, UpstreamDomainError
from infranodus_mcp.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Checkpoint:
    status: str
    message: str
    progress: int | None = None
    carries_result: bool = False


GATEWAY_CALL = object()

PROGRESS_PLAN: tuple[Checkpoint | object, ...] = (
    Checkpoint("starting", "Initializing analysis..."),
    Checkpoint("processing", "Analyzing text content...", 25),
    Checkpoint("processing", "Building knowledge graph...", 50),
    Checkpoint("processing", "Sending request to InfraNodus...", 75),
    GATEWAY_CALL,
    Checkpoint("processing", "Generating research questions...", 90),
    Checkpoint("complete", "Analysis complete", 100, carries_result=True),
)


@dataclass(frozen=True)
class StreamEvent:
    event: str
    data: dict[str, Any]
    id: str

    @property
    def is_terminal(self) -> bool:
        return self.event in ("complete", "error")

    def to_sse(self) -> dict[str, str]:
        return {"event": self.event, "data": json.dumps(self.data), "id": self.id}


@dataclass
class ProgressOutcome:
    stream_id: str
    response: GraphResponse | None = None
    cancelled: bool = False
    events: list[StreamEvent] = field(default_factory=list)


EmitFn = Callable[[StreamEvent], Awaitable[None]]
SendFn = Callable[[str, dict[str, Any]], Awaitable[GraphResponse]]


class StreamRegistry:
    """Stream id -> liveness flag. Cancelling is one-way.

    Only touched from the event loop, so no locking is needed.
    """

    def __init__(self) -> None:
        self._active: dict[str, bool] = {}

    def start(self, stream_id: str) -> bool:
        if stream_id in self._active:
            return False
        self._active[stream_id] = True
        return True

    def cancel(self, stream_id: str) -> bool:
        if stream_id not in self._active:
            return False
        self._active[stream_id] = False
        return True

    def is_active(self, stream_id: str) -> bool:
        return self._active.get(stream_id, False)

    def remove(self, stream_id: str) -> None:
        self._active.pop(stream_id, None)

    def __contains__(self, stream_id: object) -> bool:
        return stream_id in self._active

    def __len__(self) -> int:
        return len(self._active)


async def run_progress(
    stream_id: str,
    send: SendFn,
    request: GraphQueryRequest,
    emit: EmitFn,
    registry: StreamRegistry,
) -> ProgressOutcome:
    """Execute ``PROGRESS_PLAN`` for one request.

    Gateway errors, and an ``error`` reported in an otherwise successful
    response, are re-raised after the terminal ``error`` event has been
    emitted. Task cancellation ends the run with a cancelled ``complete``.
    """
    if not registry.start(stream_id):
        raise StreamConflictError(f"Stream '{stream_id}' is already running")

    outcome = ProgressOutcome(stream_id=stream_id)
    seq = itertools.count(1)

    async def _emit(event_type: str, data: dict[str, Any], event_id: str | None = None) -> None:
        event = StreamEvent(event_type, data, event_id or f"{stream_id}-{next(seq)}")
        outcome.events.append(event)
        await emit(event)

    try:
        for step in PROGRESS_PLAN:
            if not registry.is_active(stream_id):
                outcome.cancelled = True
                logger.info("stream_cancelled", stream_id=stream_id)
                break

            if step is GATEWAY_CALL:
                outcome.response = await send(request.path, request.body)
                if outcome.response.error:
                    raise UpstreamDomainError(str(outcome.response.error))
                continue

            data: dict[str, Any] = {"status": step.status, "message": step.message}
            if step.progress is not None:
                data["progress"] = step.progress
            if step.carries_result and outcome.response is not None:
                data["data"] = outcome.response.model_dump(by_alias=True, exclude_unset=True)
            await _emit("message", data)

        terminal: dict[str, Any] = {"streamId": stream_id}
        if outcome.cancelled:
            terminal["cancelled"] = True
        await _emit("complete", terminal, f"{stream_id}-complete")
        return outcome

    except asyncio.CancelledError:
        # The hosting task was cancelled (MCP cancellation or client disconnect).
        registry.cancel(stream_id)
        outcome.cancelled = True
        logger.info("stream_cancelled", stream_id=stream_id)
        await _emit("complete", {"streamId": stream_id, "cancelled": True}, f"{stream_id}-complete")
        raise

    except Exception as exc:
        logger.warning("stream_failed", stream_id=stream_id, error=str(exc))
        await _emit("error", {"error": str(exc)}, f"{stream_id}-error")
        raise

    finally:
        registry.remove(stream_id)
