"""The tool catalog: name -> input schema, request policy and projection."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from infranodus_mcp.models.graph import GraphResponse
from infranodus_mcp.models.schemas import StructuredOutput
from infranodus_mcp.services.stream_service import StreamEvent, StreamRegistry, run_progress
from infranodus_mcp.tools import request_policies as req
from infranodus_mcp.tools.schemas import (
    AnalyzeExistingGraphInput,
    CreateGraphInput,
    FetchInput,
    GenerateGraphInput,
    ResearchQuestionsFromGraphInput,
    ResearchQuestionsInput,
    ResponsesFromGraphInput,
    SearchInput,
    StreamingResearchQuestionsInput,
    TextInput,
    ToolInput,
)
from infranodus_mcp.tools.transformers import (
    transform_fetch,
    transform_gaps,
    transform_knowledge_graph,
    transform_research_questions,
    transform_responses,
    transform_search,
    transform_text_overview,
    transform_topics,
)
from infranodus_mcp.utils.exceptions import StreamCancelledError, UpstreamDomainError

if TYPE_CHECKING:
    from infranodus_mcp.services.infranodus_client import InfraNodusClient
    from infranodus_mcp.services.sse_hub import SseHub

ProgressFn = Callable[[StreamEvent], Awaitable[None]]


@dataclass
class ToolContext:
    client: InfraNodusClient
    streams: StreamRegistry
    hub: SseHub | None = None
    progress: ProgressFn | None = None


Handler = Callable[[Any, ToolContext], Awaitable[StructuredOutput]]


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    title: str
    description: str
    input_model: type[ToolInput]
    handler: Handler

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema(by_alias=True)


def raise_for_upstream_error(response: GraphResponse) -> GraphResponse:
    if response.error:
        message = response.error if isinstance(response.error, str) else str(response.error)
        raise UpstreamDomainError(message)
    return response


async def _send(ctx: ToolContext, request: req.GraphQueryRequest) -> GraphResponse:
    response = await ctx.client.send(request.path, request.body)
    return raise_for_upstream_error(response)


# ── Handlers ─────────────────────────────────────────────────────────


async def _generate_knowledge_graph(params: GenerateGraphInput, ctx: ToolContext) -> StructuredOutput:
    response = await _send(ctx, req.build_generate_graph_request(params))
    return transform_knowledge_graph(response, params.include_graph, params.add_nodes_and_edges)


async def _create_knowledge_graph(params: CreateGraphInput, ctx: ToolContext) -> StructuredOutput:
    response = await _send(ctx, req.build_create_graph_request(params))
    return transform_knowledge_graph(response, include_graph=True)


async def _analyze_existing_graph(params: AnalyzeExistingGraphInput, ctx: ToolContext) -> StructuredOutput:
    response = await _send(ctx, req.build_analyze_existing_graph_request(params))
    return transform_knowledge_graph(response, params.include_graph, params.add_nodes_and_edges)


async def _generate_content_gaps(params: TextInput, ctx: ToolContext) -> StructuredOutput:
    response = await _send(ctx, req.build_extended_summary_request(params.text))
    return transform_gaps(response)


async def _generate_topical_clusters(params: TextInput, ctx: ToolContext) -> StructuredOutput:
    response = await _send(ctx, req.build_extended_summary_request(params.text))
    return transform_topics(response)


async def _generate_text_overview(params: TextInput, ctx: ToolContext) -> StructuredOutput:
    response = await _send(ctx, req.build_text_overview_request(params.text))
    return transform_text_overview(response)


async def _generate_research_questions(params: ResearchQuestionsInput, ctx: ToolContext) -> StructuredOutput:
    response = await _send(ctx, req.build_research_questions_request(params))
    return transform_research_questions(response)


async def _generate_research_questions_from_graph(
    params: ResearchQuestionsFromGraphInput, ctx: ToolContext
) -> StructuredOutput:
    response = await _send(ctx, req.build_research_questions_from_graph_request(params))
    return transform_research_questions(response)


async def _generate_responses_from_graph(params: ResponsesFromGraphInput, ctx: ToolContext) -> StructuredOutput:
    response = await _send(ctx, req.build_responses_from_graph_request(params))
    return transform_responses(response)


async def _search(params: SearchInput, ctx: ToolContext) -> StructuredOutput:
    response = await _send(ctx, req.build_search_request(params))
    return transform_search(response, params.query)


async def _fetch(params: FetchInput, ctx: ToolContext) -> StructuredOutput:
    target = req.parse_fetch_id(params.id)
    response = await _send(ctx, req.build_fetch_request(target))
    return transform_fetch(response, params.id, target.graph_name)


async def _generate_research_questions_streaming(
    params: StreamingResearchQuestionsInput, ctx: ToolContext
) -> StructuredOutput:
    stream_id = params.stream_id or f"research-{uuid.uuid4().hex[:12]}"

    async def emit(event: StreamEvent) -> None:
        if ctx.hub is not None:
            await ctx.hub.publish(stream_id, event)
        if ctx.progress is not None and event.event == "message":
            await ctx.progress(event)

    outcome = await run_progress(
        stream_id,
        ctx.client.send,
        req.build_research_questions_request(params),
        emit,
        ctx.streams,
    )
    if outcome.cancelled or outcome.response is None:
        raise StreamCancelledError(f"Stream '{stream_id}' was cancelled")
    return transform_research_questions(outcome.response)


# ── Catalog ──────────────────────────────────────────────────────────


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="generateKnowledgeGraph",
        title="Generate Knowledge Graph from Text",
        description=(
            "Analyze text and generate a knowledge graph with topics, concepts, and structural gaps. "
            "Nothing is saved to your InfraNodus account."
        ),
        input_model=GenerateGraphInput,
        handler=_generate_knowledge_graph,
    ),
    ToolDefinition(
        name="createKnowledgeGraph",
        title="Create a Knowledge Graph in InfraNodus from Text",
        description="Create a knowledge graph in InfraNodus from text and provide a link to it",
        input_model=CreateGraphInput,
        handler=_create_knowledge_graph,
    ),
    ToolDefinition(
        name="analyzeExistingGraphByName",
        title="Analyze Existing InfraNodus Graph",
        description="Retrieve and analyze an existing graph from your InfraNodus account",
        input_model=AnalyzeExistingGraphInput,
        handler=_analyze_existing_graph,
    ),
    ToolDefinition(
        name="generateContentGaps",
        title="Generate Content Gaps",
        description="Generate content gaps from text using knowledge graph analysis",
        input_model=TextInput,
        handler=_generate_content_gaps,
    ),
    ToolDefinition(
        name="generateTopicalClusters",
        title="Generate Topical Clusters",
        description="Generate topics and clusters of keywords from text using knowledge graph analysis",
        input_model=TextInput,
        handler=_generate_topical_clusters,
    ),
    ToolDefinition(
        name="generateTextOverview",
        title="Generate an Overview of a Text",
        description=(
            "Generate a topical overview of a text and provide insights for LLMs to generate better responses"
        ),
        input_model=TextInput,
        handler=_generate_text_overview,
    ),
    ToolDefinition(
        name="generateResearchQuestions",
        title="Generate Research Questions from Text",
        description="Analyze text and generate research questions based on the content gaps identified",
        input_model=ResearchQuestionsInput,
        handler=_generate_research_questions,
    ),
    ToolDefinition(
        name="generateResearchQuestionsFromGraph",
        title="Generate Research Questions from an InfraNodus Graph",
        description=(
            "Retrieve an InfraNodus graph and generate research questions based on the content gaps identified"
        ),
        input_model=ResearchQuestionsFromGraphInput,
        handler=_generate_research_questions_from_graph,
    ),
    ToolDefinition(
        name="generateResponsesFromGraph",
        title="Generate Responses and Expert Advice from an InfraNodus Graph",
        description=(
            "Retrieve an InfraNodus graph and generate responses and expert advice based on a prompt provided"
        ),
        input_model=ResponsesFromGraphInput,
        handler=_generate_responses_from_graph,
    ),
    ToolDefinition(
        name="search",
        title="Search through Existing InfraNodus Graphs",
        description="Find the concepts and terms in existing InfraNodus graphs",
        input_model=SearchInput,
        handler=_search,
    ),
    ToolDefinition(
        name="fetch",
        title="Fetch a Search Result",
        description="Fetch a specific search result for a graph",
        input_model=FetchInput,
        handler=_fetch,
    ),
    ToolDefinition(
        name="generateResearchQuestionsStreaming",
        title="Generate Research Questions with Streaming",
        description=(
            "Analyze text and generate research questions, reporting progress over SSE "
            "and MCP progress notifications"
        ),
        input_model=StreamingResearchQuestionsInput,
        handler=_generate_research_questions_streaming,
    ),
)

TOOL_REGISTRY: dict[str, ToolDefinition] = {tool.name: tool for tool in TOOLS}
