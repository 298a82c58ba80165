"""Health probe endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from infranodus_mcp import __version__
from infranodus_mcp.api.dependencies import get_hub, get_streams
from infranodus_mcp.services.sse_hub import SseHub
from infranodus_mcp.services.stream_service import StreamRegistry

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(
    hub: SseHub = Depends(get_hub),
    streams: StreamRegistry = Depends(get_streams),
) -> dict:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "sse": {"activeConnections": len(hub)},
        "streams": {"active": len(streams)},
    }
