"""Canonical model of the InfraNodus graph/statements/advice/search responses.

The upstream API has shipped two shapes: the bare payload and the same payload
wrapped in ``entriesAndGraphOfContext``. ``normalize_response`` is the single
place that folds both into ``GraphResponse``; transformers only ever see the
normalized model.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ENVELOPE_FIELD = "entriesAndGraphOfContext"


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class ExtendedGraphSummary(_UpstreamModel):
    content_gaps: list[Any] | None = None
    main_topics: list[Any] | None = None
    main_concepts: list[Any] | None = None
    conceptual_gateways: list[Any] | None = None
    top_relations: list[Any] | None = None
    top_bigrams: list[Any] | None = None


class GraphPayload(_UpstreamModel):
    # Kept as a raw mapping: attributes use snake_case upstream (top_clusters)
    # and the graph is passed through to clients mostly verbatim.
    graphology_graph: dict[str, Any] | None = None


class EntriesAdded(_UpstreamModel):
    ids: list[Any] = Field(default_factory=list)
    texts: list[str] = Field(default_factory=list)


class GraphResponse(_UpstreamModel):
    statements: list[Any] | None = None
    graph: GraphPayload | None = None
    graph_summary: str | None = None
    extended_graph_summary: ExtendedGraphSummary | None = None
    user_name: str | None = None
    graph_name: str | None = None
    graph_url: str | None = None
    is_public: bool | None = None
    ai_advice: list[Any] | None = None
    error: Any = None

    # /search
    entries_added: EntriesAdded | None = None
    graph_urls: list[str] | None = None
    graph_names: list[str] | None = None

    @property
    def graphology_graph(self) -> dict[str, Any] | None:
        if self.graph is None:
            return None
        return self.graph.graphology_graph


def unwrap_envelope(payload: dict[str, Any]) -> dict[str, Any]:
    envelope = payload.get(ENVELOPE_FIELD)
    if isinstance(envelope, dict):
        return envelope
    return payload


def normalize_response(payload: Any) -> GraphResponse:
    """Map either historical response shape onto ``GraphResponse``."""
    if not isinstance(payload, dict):
        return GraphResponse(error=f"Unexpected response type: {type(payload).__name__}")
    return GraphResponse.model_validate(unwrap_envelope(payload))
