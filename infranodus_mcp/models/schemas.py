"""Structured tool outputs: strict projections of ``GraphResponse``.

Every output serializes with camelCase keys and only the fields that were
explicitly set, so absent upstream data stays absent instead of turning into
``null`` or empty values.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StructuredOutput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class GraphStatistics(StructuredOutput):
    modularity: float = 0
    node_count: int = 0
    edge_count: int = 0
    cluster_count: int = 0


class KnowledgeGraphOutput(StructuredOutput):
    statistics: GraphStatistics
    graph_summary: str | None = None
    content_gaps: list[Any] | None = None
    main_topical_clusters: list[Any] | None = None
    main_concepts: list[Any] | None = None
    conceptual_gateways: list[Any] | None = None
    top_relations: list[Any] | None = None
    top_bigrams: list[Any] | None = None
    statements: list[Any] | None = None
    knowledge_graph: dict[str, Any] | None = None
    knowledge_graph_by_cluster: Any = None
    top_clusters: Any = None
    user_name: str | None = None
    graph_name: str | None = None
    graph_url: str | None = None
    is_public: bool | None = None


class GapsOutput(StructuredOutput):
    content_gaps: list[Any] | None = None


class TopicsOutput(StructuredOutput):
    topical_clusters: list[Any] | None = None


class TextOverviewOutput(StructuredOutput):
    text_overview: str | None = None


class ResearchQuestionsOutput(StructuredOutput):
    questions: list[Any] | None = None


class ResponsesOutput(StructuredOutput):
    responses: list[Any] | None = None


class SearchResult(StructuredOutput):
    id: str
    title: str
    url: str


class SearchOutput(StructuredOutput):
    results: list[SearchResult] | None = None


class FetchOutput(StructuredOutput):
    id: str
    title: str
    text: str | None = None
    url: str | None = None
