"""Command-line entry point: ``infranodus-mcp [stdio|http]``."""

from __future__ import annotations

import argparse
import asyncio
import sys

from infranodus_mcp.config import load_settings
from infranodus_mcp.utils.exceptions import ConfigurationError
from infranodus_mcp.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="infranodus-mcp",
        description="InfraNodus knowledge-graph tools over MCP (stdio) or HTTP/SSE",
    )
    parser.add_argument(
        "transport",
        nargs="?",
        choices=["stdio", "http"],
        default="stdio",
        help="stdio serves MCP on stdin/stdout; http serves the REST/SSE wrapper",
    )
    parser.add_argument("--host", default=None, help="HTTP bind host (default: HTTP_HOST)")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (default: HTTP_PORT)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        setup_logging()
        logger.error("configuration_invalid", error=str(exc), hint="Set INFRANODUS_API_KEY")
        return 1

    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    if args.transport == "http":
        import uvicorn

        uvicorn.run(
            "infranodus_mcp.main:app",
            host=args.host or settings.HTTP_HOST,
            port=args.port or settings.HTTP_PORT,
            log_config=None,
        )
        return 0

    from infranodus_mcp.mcp_server import serve_stdio

    try:
        asyncio.run(serve_stdio(settings))
    except KeyboardInterrupt:
        logger.info("mcp_server_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
