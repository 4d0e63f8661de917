"""HTTP client wrappers for the mempool API."""

from .client import (
    ERROR_PREFIX,
    InvalidResponseError,
    MempoolApiClient,
    MempoolApiError,
    ToolResult,
    UpstreamUnreachableError,
    default_client,
    render_yaml,
)

__all__ = [
    "MempoolApiClient",
    "MempoolApiError",
    "UpstreamUnreachableError",
    "InvalidResponseError",
    "ToolResult",
    "ERROR_PREFIX",
    "default_client",
    "render_yaml",
]
