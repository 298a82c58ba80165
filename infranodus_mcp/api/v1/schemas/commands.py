"""Request models for the REST wrappers around the tool catalog."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeOptions(_CamelModel):
    optimize: str = "gap"
    include_graph_summary: bool = False
    include_graph: bool = False
    request_mode: Literal["question", "response"] = "question"
    model_to_use: str | None = None


class AnalyzeRequest(_CamelModel):
    text: str = Field(..., min_length=1)
    stream_id: str | None = None
    options: AnalyzeOptions = Field(default_factory=AnalyzeOptions)


class CommandRequest(_CamelModel):
    command: str = Field(..., min_length=1, examples=["generateContentGaps"])
    params: dict[str, Any] = Field(default_factory=dict)
    stream_id: str | None = None
