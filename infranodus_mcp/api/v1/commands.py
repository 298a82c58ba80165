"""REST wrappers around the tool catalog, reporting progress to SSE channels."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from infranodus_mcp.api.dependencies import (
    get_app_settings,
    get_client,
    get_dispatcher,
    get_hub,
    get_streams,
)
from infranodus_mcp.api.v1.schemas.commands import AnalyzeRequest, CommandRequest
from infranodus_mcp.config import Settings
from infranodus_mcp.services.infranodus_client import InfraNodusClient
from infranodus_mcp.services.sse_hub import SseHub
from infranodus_mcp.services.stream_service import StreamEvent, StreamRegistry, run_progress
from infranodus_mcp.tools.dispatcher import ToolDispatcher
from infranodus_mcp.tools.request_policies import GRAPH_AND_ADVICE, GraphQueryRequest, advice_query
from infranodus_mcp.tools.transformers import transform_research_questions, transform_responses
from infranodus_mcp.utils.exceptions import RemoteApiError, StreamConflictError, UpstreamDomainError
from infranodus_mcp.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["tools"])


def _flag(value: bool) -> str:
    return "true" if value else "false"


@router.post("/analyze")
async def analyze(
    request: AnalyzeRequest,
    settings: Settings = Depends(get_app_settings),
    client: InfraNodusClient = Depends(get_client),
    hub: SseHub = Depends(get_hub),
    streams: StreamRegistry = Depends(get_streams),
):
    """Run the research-questions pipeline with progress events on ``/sse/stream/{streamId}``."""
    stream_id = request.stream_id or f"analysis-{uuid.uuid4().hex[:12]}"
    options = request.options

    query_request = GraphQueryRequest(
        GRAPH_AND_ADVICE,
        advice_query(
            optimize=options.optimize,
            include_graph_summary=_flag(options.include_graph_summary),
            include_graph=_flag(options.include_graph),
        ),
        {
            "text": request.text,
            "aiTopics": "true",
            "requestMode": options.request_mode,
            "modelToUse": options.model_to_use or settings.DEFAULT_MODEL,
        },
    )

    async def emit(event: StreamEvent) -> None:
        await hub.publish(stream_id, event)

    try:
        outcome = await run_progress(stream_id, client.send, query_request, emit, streams)
    except StreamConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except (RemoteApiError, UpstreamDomainError) as exc:
        logger.warning("analyze_failed", stream_id=stream_id, error=str(exc))
        return JSONResponse(status_code=502, content={"streamId": stream_id, "error": str(exc)})

    if outcome.cancelled or outcome.response is None:
        return {"streamId": stream_id, "cancelled": True}

    if options.request_mode == "response":
        result = transform_responses(outcome.response)
    else:
        result = transform_research_questions(outcome.response)
    return {"streamId": stream_id, "result": result.to_payload()}


@router.post("/command")
async def run_command(
    request: CommandRequest,
    dispatcher: ToolDispatcher = Depends(get_dispatcher),
    hub: SseHub = Depends(get_hub),
) -> dict:
    """Invoke a catalog tool by name, announcing start and end on the SSE channel."""
    if dispatcher.get_tool(request.command) is None:
        raise HTTPException(status_code=404, detail=f"Unknown command: {request.command}")

    stream_id = request.stream_id or f"command-{uuid.uuid4().hex[:12]}"
    await hub.publish(stream_id, StreamEvent("start", {"command": request.command}, f"{stream_id}-start"))

    async def progress(event: StreamEvent) -> None:
        await hub.publish(stream_id, event)

    result = await dispatcher.invoke(request.command, request.params, progress=progress)

    if result.is_error:
        await hub.publish(stream_id, StreamEvent("error", result.payload, f"{stream_id}-error"))
    else:
        await hub.publish(stream_id, StreamEvent("complete", {"streamId": stream_id}, f"{stream_id}-complete"))

    return {"streamId": stream_id, "result": result.payload, "isError": result.is_error}


@router.get("/tools")
async def list_tools(dispatcher: ToolDispatcher = Depends(get_dispatcher)) -> dict:
    return {
        "tools": [
            {
                "name": tool.name,
                "title": tool.title,
                "description": tool.description,
                "inputSchema": tool.input_schema,
            }
            for tool in dispatcher.list_tools()
        ]
    }
