"""Shared FastAPI dependency injection."""

from __future__ import annotations

from infranodus_mcp.config import Settings
from infranodus_mcp.services.infranodus_client import InfraNodusClient
from infranodus_mcp.services.sse_hub import SseHub
from infranodus_mcp.services.stream_service import StreamRegistry
from infranodus_mcp.tools.dispatcher import ToolDispatcher

_settings: Settings | None = None
_client: InfraNodusClient | None = None
_dispatcher: ToolDispatcher | None = None
_hub: SseHub | None = None
_streams: StreamRegistry | None = None


def set_settings(settings: Settings) -> None:
    global _settings
    _settings = settings


def set_client(client: InfraNodusClient, hub: SseHub, streams: StreamRegistry) -> None:
    """Bind the client and rebuild the dispatcher around it."""
    global _client, _dispatcher, _hub, _streams
    _client = client
    _hub = hub
    _streams = streams
    _dispatcher = ToolDispatcher(client, streams=streams, hub=hub)


def get_app_settings() -> Settings:
    if _settings is None:
        raise RuntimeError("Settings not initialized")
    return _settings


def get_client() -> InfraNodusClient:
    if _client is None:
        raise RuntimeError("InfraNodus client not initialized")
    return _client


def get_dispatcher() -> ToolDispatcher:
    if _dispatcher is None:
        raise RuntimeError("Tool dispatcher not initialized")
    return _dispatcher


def get_hub() -> SseHub:
    if _hub is None:
        raise RuntimeError("SSE hub not initialized")
    return _hub


def get_streams() -> StreamRegistry:
    if _streams is None:
        raise RuntimeError("Stream registry not initialized")
    return _streams
