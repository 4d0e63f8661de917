"""
Thin HTTP client for the mempool mining endpoints.

Requests are plain GETs with no retry. Payloads are handed back to callers as
YAML text wrapped in a ``ToolResult``; failures are converted to error results
at this boundary and never raised to the tool layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
import yaml

from mempool_mcp.config import MempoolConfig, default_config

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Error fetching data: "


class MempoolApiError(Exception):
    """Base exception for upstream API errors."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class UpstreamUnreachableError(MempoolApiError):
    """Raised when the upstream API cannot be reached."""


class InvalidResponseError(MempoolApiError):
    """Raised when the upstream body is not valid JSON."""


@dataclass(slots=True)
class ToolResult:
    """Single text content block returned for every tool invocation."""

    content: List[Dict[str, str]] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": text}])

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": message}], is_error=True)

    @property
    def first_text(self) -> str:
        return self.content[0]["text"] if self.content else ""

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"content": [dict(item) for item in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload


def render_yaml(data: Any) -> str:
    """Block-style YAML with keys kept in upstream order."""
    return yaml.safe_dump(
        data,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def _describe(exc: BaseException) -> str:
    message = str(exc)
    return message if message else exc.__class__.__name__


class MempoolApiClient:
    """Async client for the mempool.space mining API surface."""

    def __init__(
        self,
        config: MempoolConfig | None = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or default_config
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            if self.config.timeout is not None:
                self._client = httpx.AsyncClient(timeout=self.config.timeout)
            else:
                self._client = httpx.AsyncClient()
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_json(self, url: str) -> Any:
        """
        GET ``url`` and parse the body as JSON.

        The HTTP status code is not inspected; any body is parsed.

        Raises:
            UpstreamUnreachableError: on transport-level failures.
            InvalidResponseError: when the body is not JSON.
        """
        client = await self._get_client()
        try:
            response = await client.get(url)
        except httpx.RequestError as exc:
            raise UpstreamUnreachableError(_describe(exc), url=url) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponseError(_describe(exc), url=url) from exc

    async def fetch_and_format(self, url: str) -> ToolResult:
        try:
            data = await self.fetch_json(url)
            return ToolResult.text(render_yaml(data))
        except Exception as exc:
            logger.error("Error fetching %s: %s", url, _describe(exc))
            return ToolResult.error(ERROR_PREFIX + _describe(exc))


default_client = MempoolApiClient()
