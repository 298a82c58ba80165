"""Top-level router aggregating the HTTP/SSE endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from infranodus_mcp.api.v1.commands import router as commands_router
from infranodus_mcp.api.v1.health import router as health_router
from infranodus_mcp.api.v1.stream import router as stream_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(stream_router)
api_router.include_router(commands_router)
