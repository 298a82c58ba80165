"""FastAPI application factory for the auxiliary HTTP/SSE surface."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from infranodus_mcp import __version__
from infranodus_mcp.api.dependencies import set_client, set_settings
from infranodus_mcp.api.router import api_router
from infranodus_mcp.config import load_settings
from infranodus_mcp.services.infranodus_client import InfraNodusClient
from infranodus_mcp.services.sse_hub import SseHub
from infranodus_mcp.services.stream_service import StreamRegistry
from infranodus_mcp.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Resolve configuration and build the shared client, hub and stream registry."""
    settings = load_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    set_settings(settings)

    hub = SseHub()
    set_client(InfraNodusClient(settings), hub, StreamRegistry())

    logger.info("app_started", api_base=settings.INFRANODUS_API_BASE)
    yield

    # Shutdown
    await hub.close_all()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    application = FastAPI(
        title="InfraNodus MCP",
        description="HTTP/SSE wrapper around the InfraNodus MCP tool catalog",
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router)

    @application.middleware("http")
    async def request_id_middleware(request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": type(exc).__name__},
        )

    return application


app = create_app()
