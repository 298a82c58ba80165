"""Request-building policies: which endpoint, query flags and body each tool sends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from infranodus_mcp.tools.schemas import (
    AnalyzeExistingGraphInput,
    CreateGraphInput,
    GenerateGraphInput,
    ResearchQuestionsFromGraphInput,
    ResearchQuestionsInput,
    ResponsesFromGraphInput,
    SearchInput,
)
from infranodus_mcp.utils.exceptions import ValidationError

GRAPH_AND_STATEMENTS = "/graphAndStatements"
GRAPH_AND_ADVICE = "/graphAndAdvice"
SEARCH = "/search"


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass(frozen=True)
class GraphQueryRequest:
    endpoint: str
    query: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        if not self.query:
            return self.endpoint
        return f"{self.endpoint}?{urlencode(self.query)}"


@dataclass(frozen=True)
class FetchTarget:
    user_name: str
    graph_name: str
    query: str | None


# ── /graphAndStatements ──────────────────────────────────────────────


def _with_entity_mode(body: dict[str, Any], mode: str) -> dict[str, Any]:
    if mode and mode != "none":
        body["modifyAnalyzedText"] = mode
    return body


def build_generate_graph_request(params: GenerateGraphInput) -> GraphQueryRequest:
    query = {
        "doNotSave": "true",
        "addStats": "true",
        "includeStatements": _flag(params.include_statements),
        "includeGraphSummary": "false",
        "extendedGraphSummary": "true",
        "includeGraph": _flag(params.include_graph),
        "aiTopics": "true",
        "optimize": "develop",
    }
    body = _with_entity_mode({"text": params.text, "aiTopics": "true"}, params.modify_analyzed_text)
    return GraphQueryRequest(GRAPH_AND_STATEMENTS, query, body)


def build_create_graph_request(params: CreateGraphInput) -> GraphQueryRequest:
    query = {
        "doNotSave": "false",
        "addStats": "true",
        "includeStatements": _flag(params.include_statements),
        "includeGraphSummary": "false",
        "extendedGraphSummary": "true",
        "includeGraph": "true",
        "aiTopics": "true",
        "optimize": "develop",
    }
    body = _with_entity_mode(
        {"name": params.graph_name, "text": params.text, "aiTopics": "true"},
        params.modify_analyzed_text,
    )
    return GraphQueryRequest(GRAPH_AND_STATEMENTS, query, body)


def build_analyze_existing_graph_request(params: AnalyzeExistingGraphInput) -> GraphQueryRequest:
    query = {
        "doNotSave": "true",
        "addStats": "true",
        "includeStatements": _flag(params.include_statements),
        "includeGraphSummary": _flag(params.include_graph_summary),
        "extendedGraphSummary": "true",
        "includeGraph": _flag(params.include_graph),
        "aiTopics": "true",
        "optimize": "develop",
    }
    return GraphQueryRequest(GRAPH_AND_STATEMENTS, query, {"name": params.graph_name, "aiTopics": "true"})


def _summary_only_query(*, graph_summary: bool, extended_summary: bool) -> dict[str, str]:
    return {
        "doNotSave": "true",
        "addStats": "true",
        "includeGraphSummary": _flag(graph_summary),
        "extendedGraphSummary": _flag(extended_summary),
        "includeGraph": "false",
        "includeStatements": "false",
        "aiTopics": "true",
    }


def build_extended_summary_request(text: str) -> GraphQueryRequest:
    """Content gaps and topical clusters both read only the extended summary."""
    query = _summary_only_query(graph_summary=False, extended_summary=True)
    return GraphQueryRequest(GRAPH_AND_STATEMENTS, query, {"text": text})


def build_text_overview_request(text: str) -> GraphQueryRequest:
    query = _summary_only_query(graph_summary=True, extended_summary=False)
    return GraphQueryRequest(GRAPH_AND_STATEMENTS, query, {"text": text})


# ── /graphAndAdvice ──────────────────────────────────────────────────


def advice_query(
    *,
    optimize: str = "gap",
    include_graph_summary: str = "false",
    include_graph: str = "false",
) -> dict[str, str]:
    return {
        "doNotSave": "true",
        "addStats": "true",
        "optimize": optimize,
        "includeStatements": "false",
        "includeGraphSummary": include_graph_summary,
        "extendedGraphSummary": "false",
        "includeGraph": include_graph,
        "aiTopics": "true",
    }


def _gap_query(use_several_gaps: bool, gap_depth: int) -> dict[str, str]:
    query = advice_query()
    query["extendedAdvice"] = _flag(use_several_gaps)
    query["gapDepth"] = str(gap_depth or 0)
    return query


def build_research_questions_request(params: ResearchQuestionsInput) -> GraphQueryRequest:
    body = {
        "text": params.text,
        "aiTopics": "true",
        "requestMode": "question",
        "modelToUse": params.model_to_use,
    }
    return GraphQueryRequest(GRAPH_AND_ADVICE, _gap_query(params.use_several_gaps, params.gap_depth), body)


def build_research_questions_from_graph_request(
    params: ResearchQuestionsFromGraphInput,
) -> GraphQueryRequest:
    body = {
        "name": params.graph_name,
        "aiTopics": "true",
        "requestMode": "question",
        "modelToUse": params.model_to_use,
    }
    return GraphQueryRequest(GRAPH_AND_ADVICE, _gap_query(params.use_several_gaps, params.gap_depth), body)


def build_responses_from_graph_request(params: ResponsesFromGraphInput) -> GraphQueryRequest:
    body = {
        "name": params.graph_name,
        "aiTopics": "true",
        "requestMode": "response",
        "prompt": params.prompt,
        "modelToUse": params.model_to_use,
    }
    return GraphQueryRequest(GRAPH_AND_ADVICE, advice_query(), body)


# ── /search ──────────────────────────────────────────────────────────


def build_search_request(params: SearchInput) -> GraphQueryRequest:
    body = {
        "query": params.query,
        "contextNames": ",".join(params.context_names) if params.context_names else "",
    }
    return GraphQueryRequest(SEARCH, {}, body)


def parse_fetch_id(search_id: str) -> FetchTarget:
    """Split ``userName:graphName[:query]``; the query keeps any further colons."""
    parts = search_id.split(":", 2)
    if len(parts) < 2:
        raise ValidationError("id", "Invalid search ID, expected userName:graphName:query")
    query = parts[2] if len(parts) > 2 else None
    return FetchTarget(user_name=parts[0], graph_name=parts[1], query=query)


def build_fetch_request(target: FetchTarget) -> GraphQueryRequest:
    body: dict[str, Any] = {}
    if target.query is not None:
        body["query"] = target.query
    body["contextNames"] = target.graph_name
    body["userName"] = target.user_name
    return GraphQueryRequest(SEARCH, {}, body)
