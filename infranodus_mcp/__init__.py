"""MCP adapter exposing the InfraNodus knowledge-graph API as tools and resources."""

__version__ = "1.0.0"
