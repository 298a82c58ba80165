"""Static ``info://about`` resource."""

from __future__ import annotations

from infranodus_mcp.tools.catalog import TOOLS

ABOUT_URI = "info://about"
ABOUT_NAME = "About InfraNodus MCP Server"
ABOUT_DESCRIPTION = "Information about this MCP server and InfraNodus capabilities"
ABOUT_MIME_TYPE = "text/plain"


def render_about() -> str:
    tool_lines = "\n".join(
        f"{i}. {tool.name} - {tool.description}" for i, tool in enumerate(TOOLS, start=1)
    )
    return f"""InfraNodus MCP Server

This server provides tools for text analysis and knowledge graph generation using the InfraNodus API.

Available Tools:
{tool_lines}

Key Features:
- Topic modeling and clustering
- Content gap detection (finding missing connections)
- Network statistics (modularity, centrality, etc.)
- AI-powered topic naming
- Entity detection for cleaner graphs

Configuration:
- Requires the INFRANODUS_API_KEY environment variable
- Get your API key at: https://infranodus.com/api-access

InfraNodus uses graph theory algorithms to:
- Identify clusters of related ideas
- Highlight influential concepts
- Reveal gaps in discourse
- Generate research questions
- Optimize knowledge base structure

Learn more: https://infranodus.com
"""


ABOUT_TEXT = render_about()
