"""Tool invocation boundary: validate, run, and convert every failure to output."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from infranodus_mcp.services.stream_service import StreamRegistry
from infranodus_mcp.tools.catalog import TOOL_REGISTRY, ProgressFn, ToolContext, ToolDefinition
from infranodus_mcp.tools.schemas import validate_arguments
from infranodus_mcp.utils.exceptions import InfraNodusMcpError
from infranodus_mcp.utils.logging import get_logger

if TYPE_CHECKING:
    from infranodus_mcp.services.infranodus_client import InfraNodusClient
    from infranodus_mcp.services.sse_hub import SseHub

logger = get_logger(__name__)


@dataclass(frozen=True)
class ToolResult:
    payload: dict[str, Any]
    is_error: bool = False

    @property
    def text(self) -> str:
        if self.is_error:
            return json.dumps(self.payload, ensure_ascii=False)
        return json.dumps(self.payload, indent=2, ensure_ascii=False)

    @classmethod
    def error(cls, message: str) -> ToolResult:
        return cls({"error": message}, is_error=True)


class ToolDispatcher:
    """Routes tool calls by name through the catalog.

    One dispatcher is bound to one ``InfraNodusClient``; a multi-tenant host
    builds one per tenant configuration.
    """

    def __init__(
        self,
        client: InfraNodusClient,
        streams: StreamRegistry | None = None,
        hub: SseHub | None = None,
        catalog: dict[str, ToolDefinition] | None = None,
    ) -> None:
        self._client = client
        self._streams = streams if streams is not None else StreamRegistry()
        self._hub = hub
        self._catalog = catalog if catalog is not None else TOOL_REGISTRY

    @property
    def streams(self) -> StreamRegistry:
        return self._streams

    def list_tools(self) -> list[ToolDefinition]:
        return list(self._catalog.values())

    def get_tool(self, name: str) -> ToolDefinition | None:
        return self._catalog.get(name)

    async def invoke(
        self,
        name: str,
        arguments: dict[str, Any] | None,
        progress: ProgressFn | None = None,
    ) -> ToolResult:
        tool = self._catalog.get(name)
        if tool is None:
            logger.warning("unknown_tool", tool=name)
            return ToolResult.error(f"Unknown tool: {name}")

        try:
            params = validate_arguments(tool.input_model, arguments)
            ctx = ToolContext(client=self._client, streams=self._streams, hub=self._hub, progress=progress)
            output = await tool.handler(params, ctx)
        except InfraNodusMcpError as exc:
            logger.warning(
                "tool_invocation_failed",
                tool=name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return ToolResult.error(str(exc))
        except Exception as exc:
            logger.error("tool_invocation_crashed", tool=name, error=str(exc), exc_info=True)
            return ToolResult.error(str(exc) or type(exc).__name__)

        return ToolResult(output.to_payload())
