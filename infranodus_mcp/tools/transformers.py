"""Pure projections from ``GraphResponse`` onto the structured tool outputs.

None of these functions mutate their input: the nested graphology graph is
copied before lifted attributes are removed from it.
"""

from __future__ import annotations

from typing import Any

from infranodus_mcp.models.graph import GraphResponse
from infranodus_mcp.models.schemas import (
    FetchOutput,
    GapsOutput,
    GraphStatistics,
    KnowledgeGraphOutput,
    ResearchQuestionsOutput,
    ResponsesOutput,
    SearchOutput,
    SearchResult,
    TextOverviewOutput,
    TopicsOutput,
)

# extendedGraphSummary field -> KnowledgeGraphOutput field
_EXTENDED_SUMMARY_FIELDS = {
    "content_gaps": "content_gaps",
    "main_topics": "main_topical_clusters",
    "main_concepts": "main_concepts",
    "conceptual_gateways": "conceptual_gateways",
    "top_relations": "top_relations",
    "top_bigrams": "top_bigrams",
}


def _statistics(graph: dict[str, Any] | None) -> GraphStatistics:
    if graph is None:
        return GraphStatistics(modularity=0, node_count=0, edge_count=0, cluster_count=0)
    attributes = graph.get("attributes") or {}
    return GraphStatistics(
        modularity=attributes.get("modularity") or 0,
        node_count=len(graph.get("nodes") or []),
        edge_count=len(graph.get("edges") or []),
        cluster_count=len(attributes.get("top_clusters") or []),
    )


def transform_knowledge_graph(
    data: GraphResponse,
    include_graph: bool = False,
    include_nodes_and_edges: bool = False,
) -> KnowledgeGraphOutput:
    graph = data.graphology_graph
    fields: dict[str, Any] = {"statistics": _statistics(graph)}

    if data.graph_summary:
        fields["graph_summary"] = data.graph_summary

    summary = data.extended_graph_summary
    if summary is not None:
        for source, target in _EXTENDED_SUMMARY_FIELDS.items():
            value = getattr(summary, source)
            if value is not None:
                fields[target] = value

    if graph is not None:
        graph_copy = dict(graph)
        attributes = dict(graph_copy.get("attributes") or {})

        if attributes.get("dotGraphByCluster"):
            fields["knowledge_graph_by_cluster"] = attributes.pop("dotGraphByCluster")
        if attributes.get("top_clusters"):
            fields["top_clusters"] = attributes.pop("top_clusters")

        if "attributes" in graph_copy:
            graph_copy["attributes"] = attributes

        if include_graph:
            if not include_nodes_and_edges:
                graph_copy.pop("nodes", None)
                graph_copy.pop("edges", None)
            fields["knowledge_graph"] = graph_copy

    if data.statements is not None:
        fields["statements"] = data.statements

    if data.user_name:
        fields["user_name"] = data.user_name
    if data.graph_name:
        fields["graph_name"] = data.graph_name
    if data.graph_url:
        fields["graph_url"] = data.graph_url
    if data.is_public is not None:
        fields["is_public"] = data.is_public

    return KnowledgeGraphOutput(**fields)


def transform_gaps(data: GraphResponse) -> GapsOutput:
    summary = data.extended_graph_summary
    if summary is not None and summary.content_gaps is not None:
        return GapsOutput(content_gaps=summary.content_gaps)
    return GapsOutput()


def transform_topics(data: GraphResponse) -> TopicsOutput:
    summary = data.extended_graph_summary
    if summary is not None and summary.main_topics is not None:
        return TopicsOutput(topical_clusters=summary.main_topics)
    return TopicsOutput()


def transform_text_overview(data: GraphResponse) -> TextOverviewOutput:
    if data.graph_summary:
        return TextOverviewOutput(text_overview=data.graph_summary)
    return TextOverviewOutput()


def transform_research_questions(data: GraphResponse) -> ResearchQuestionsOutput:
    if data.ai_advice is not None:
        return ResearchQuestionsOutput(questions=data.ai_advice)
    return ResearchQuestionsOutput()


def transform_responses(data: GraphResponse) -> ResponsesOutput:
    if data.ai_advice is not None:
        return ResponsesOutput(responses=data.ai_advice)
    return ResponsesOutput()


def transform_search(data: GraphResponse, query: str) -> SearchOutput:
    """One result per matching graph; the id round-trips through ``fetch``."""
    if not data.graph_names:
        return SearchOutput()

    user_name = data.user_name or ""
    urls = data.graph_urls or []
    results = [
        SearchResult(
            id=f"{user_name}:{name}:{query}",
            title=name,
            url=urls[i] if i < len(urls) else "",
        )
        for i, name in enumerate(data.graph_names)
    ]
    return SearchOutput(results=results)


def transform_fetch(data: GraphResponse, search_id: str, graph_name: str) -> FetchOutput:
    fields: dict[str, Any] = {
        "id": search_id,
        "title": data.graph_names[0] if data.graph_names else graph_name,
    }
    if data.entries_added is not None and data.entries_added.texts:
        fields["text"] = "\n\n".join(data.entries_added.texts)
    if data.graph_urls:
        fields["url"] = data.graph_urls[0]
    return FetchOutput(**fields)
