"""MCP server wiring: publishes the catalog and the about resource over stdio."""

from __future__ import annotations

from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from infranodus_mcp import __version__
from infranodus_mcp.config import Settings
from infranodus_mcp.resources.about import (
    ABOUT_DESCRIPTION,
    ABOUT_MIME_TYPE,
    ABOUT_NAME,
    ABOUT_TEXT,
    ABOUT_URI,
)
from infranodus_mcp.services.infranodus_client import InfraNodusClient
from infranodus_mcp.services.stream_service import StreamEvent
from infranodus_mcp.tools.dispatcher import ToolDispatcher
from infranodus_mcp.utils.logging import get_logger

logger = get_logger(__name__)

SERVER_NAME = "infranodus-mcp-server"
SERVER_INSTRUCTIONS = "MCP server for InfraNodus knowledge graph generation and text analysis"


def build_server(dispatcher: ToolDispatcher) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                title=tool.title,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in dispatcher.list_tools()
        ]

    # Arguments are validated by the tool input models so failures come back
    # as the structured {"error": ...} block.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        ctx = server.request_context
        token = ctx.meta.progressToken if ctx.meta is not None else None

        async def report(event: StreamEvent) -> None:
            await ctx.session.send_progress_notification(
                progress_token=token,
                progress=float(event.data.get("progress", 0)),
                total=100.0,
                message=event.data.get("message"),
            )

        progress = report if token is not None else None
        result = await dispatcher.invoke(name, arguments, progress=progress)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.text)],
            isError=result.is_error,
        )

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return [
            types.Resource(
                uri=AnyUrl(ABOUT_URI),
                name="about",
                title=ABOUT_NAME,
                description=ABOUT_DESCRIPTION,
                mimeType=ABOUT_MIME_TYPE,
            )
        ]

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        if str(uri).rstrip("/") != ABOUT_URI:
            raise ValueError(f"Unknown resource: {uri}")
        return [ReadResourceContents(content=ABOUT_TEXT, mime_type=ABOUT_MIME_TYPE)]

    return server


def create_dispatcher(settings: Settings) -> ToolDispatcher:
    return ToolDispatcher(InfraNodusClient(settings))


async def serve_stdio(settings: Settings) -> None:
    server = build_server(create_dispatcher(settings))
    logger.info("mcp_server_starting", transport="stdio", api_base=settings.INFRANODUS_API_BASE)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
