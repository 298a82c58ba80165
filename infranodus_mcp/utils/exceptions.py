"""Custom exception hierarchy for the InfraNodus MCP adapter."""

from __future__ import annotations


class InfraNodusMcpError(Exception):
    """Base exception for all adapter errors."""


class ValidationError(InfraNodusMcpError):
    """Tool input failed schema constraints. Raised before any HTTP call."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"Invalid value for '{field}': {message}")


class RemoteApiError(InfraNodusMcpError):
    """Non-2xx response, timeout, or transport failure from the InfraNodus API."""

    def __init__(self, status_code: int | None, body: str) -> None:
        self.status_code = status_code
        self.body = body
        if status_code is None:
            super().__init__(f"API request failed: {body}")
        else:
            super().__init__(f"API request failed ({status_code}): {body}")


class UpstreamDomainError(InfraNodusMcpError):
    """InfraNodus answered 200 but reported an ``error`` in the payload."""


class ConfigurationError(InfraNodusMcpError):
    """Required configuration (the API key) is missing or invalid."""


class StreamCancelledError(InfraNodusMcpError):
    """A progress stream was cancelled before the result was produced."""


class StreamConflictError(InfraNodusMcpError):
    """A stream id is already bound to a running progress stream."""
