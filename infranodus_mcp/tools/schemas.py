"""Input models for every tool in the catalog.

Field names are published to MCP clients in camelCase and must stay stable.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from infranodus_mcp.utils.exceptions import ValidationError

ModifyAnalyzedText = Literal["none", "detectEntities", "extractEntitiesOnly"]

DEFAULT_MODEL = "gpt-4o"

_MODIFY_DESCRIPTION = (
    "Entity detection: none (normal), detectEntities (detect entities and keywords), "
    "extractEntitiesOnly (only entities)"
)


class ToolInput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class GenerateGraphInput(ToolInput):
    text: str = Field(..., min_length=1, description="Text that you'd like to analyze")
    include_statements: bool = Field(default=False, description="Include processed statements in response")
    include_graph: bool = Field(default=False, description="Include the graph structure (without nodes and edges)")
    add_nodes_and_edges: bool = Field(default=False, description="Also include raw nodes and edges with the graph")
    modify_analyzed_text: ModifyAnalyzedText = Field(default="none", description=_MODIFY_DESCRIPTION)


class CreateGraphInput(ToolInput):
    graph_name: str = Field(..., min_length=1, description="Name of the graph to create in your InfraNodus account")
    text: str = Field(..., min_length=1, description="Text to add to the graph")
    include_statements: bool = Field(default=False, description="Include processed statements in response")
    modify_analyzed_text: ModifyAnalyzedText = Field(default="none", description=_MODIFY_DESCRIPTION)


class AnalyzeExistingGraphInput(ToolInput):
    graph_name: str = Field(
        ..., min_length=1, description="Name of the existing InfraNodus graph in your account to retrieve"
    )
    include_statements: bool = Field(default=True, description="Include processed statements in response")
    include_graph_summary: bool = Field(
        default=False, description="Include AI-generated graph summary for RAG prompt augmentation"
    )
    include_graph: bool = Field(default=False, description="Include the graph structure (without nodes and edges)")
    add_nodes_and_edges: bool = Field(default=False, description="Also include raw nodes and edges with the graph")


class TextInput(ToolInput):
    text: str = Field(..., min_length=1, description="Text that you'd like to analyze")


class ResearchQuestionsInput(ToolInput):
    text: str = Field(..., min_length=1, description="Text to generate research questions for")
    use_several_gaps: bool = Field(default=False, description="Generate questions for several content gaps")
    gap_depth: int = Field(default=0, ge=0, description="Depth of the gap to bridge (0 is the most prominent)")
    model_to_use: str = Field(default=DEFAULT_MODEL, min_length=1, description="AI model used for generation")


class ResearchQuestionsFromGraphInput(ToolInput):
    graph_name: str = Field(..., min_length=1, description="Name of the existing InfraNodus graph to use")
    use_several_gaps: bool = Field(default=False, description="Generate questions for several content gaps")
    gap_depth: int = Field(default=0, ge=0, description="Depth of the gap to bridge (0 is the most prominent)")
    model_to_use: str = Field(default=DEFAULT_MODEL, min_length=1, description="AI model used for generation")


class ResponsesFromGraphInput(ToolInput):
    graph_name: str = Field(..., min_length=1, description="Name of the existing InfraNodus graph to use")
    prompt: str = Field(default="", description="Prompt to answer using the graph as context")
    model_to_use: str = Field(default=DEFAULT_MODEL, min_length=1, description="AI model used for generation")


class SearchInput(ToolInput):
    query: str = Field(..., min_length=1, description="Concepts or terms to search for")
    context_names: list[str] = Field(
        default_factory=list, description="Graph names to search in (all graphs when empty)"
    )


class FetchInput(ToolInput):
    id: str = Field(..., min_length=1, description="Search result id in the form userName:graphName:query")


class StreamingResearchQuestionsInput(ResearchQuestionsInput):
    stream_id: str | None = Field(default=None, description="SSE stream id to publish progress to")


InputT = TypeVar("InputT", bound=ToolInput)


def validate_arguments(model: type[InputT], arguments: dict[str, Any] | None) -> InputT:
    """Validate raw tool arguments, naming the first offending field on failure."""
    try:
        return model.model_validate(arguments or {})
    except PydanticValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        loc = first.get("loc") or ("arguments",)
        field = ".".join(str(part) for part in loc)
        raise ValidationError(field, first.get("msg", str(exc))) from exc
