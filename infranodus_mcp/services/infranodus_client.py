"""Remote request gateway for the InfraNodus REST API.

One POST per tool invocation, bearer-authenticated, with the response folded
into ``GraphResponse``. Nothing here writes to stdout or logs on the request
path; callers own diagnostics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from infranodus_mcp.models.graph import GraphResponse, normalize_response
from infranodus_mcp.utils.exceptions import RemoteApiError

if TYPE_CHECKING:
    from infranodus_mcp.config import Settings


class InfraNodusClient:
    """Thin async client bound to one API key and base URL.

    ``transport`` lets tests (or a hosting environment) plug in a custom
    ``httpx`` transport without touching process-wide state.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = settings.INFRANODUS_API_KEY
        self._api_base = settings.INFRANODUS_API_BASE.rstrip("/")
        self._timeout = settings.INFRANODUS_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def api_base(self) -> str:
        return self._api_base

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    async def send(self, path: str, body: dict[str, Any]) -> GraphResponse:
        """POST ``body`` to ``{api_base}{path}``; ``path`` may carry a query string."""
        url = f"{self._api_base}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(url, json=body, headers=self._headers())
        except httpx.TimeoutException as exc:
            raise RemoteApiError(None, f"Request timed out after {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            raise RemoteApiError(None, str(exc) or type(exc).__name__) from exc

        if not resp.is_success:
            raise RemoteApiError(resp.status_code, resp.text)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise RemoteApiError(resp.status_code, f"Invalid JSON in response: {resp.text[:500]}") from exc

        return normalize_response(payload)
