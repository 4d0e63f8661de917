"""FastAPI application exposing the mempool mining tools over HTTP."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from mempool_mcp import mcp, rpc
from mempool_mcp.config import APP_VERSION, MempoolConfig, load_default_config
from mempool_mcp.mempool_api import MempoolApiClient

logger = logging.getLogger(__name__)

HEALTH_STATUS = {"status": "ok"}


def _log_tool_result(tool_name: str, result: Dict[str, Any], request_id: Optional[str] = None) -> None:
    if isinstance(result, dict) and result.get("isError"):
        content = result.get("content") or [{}]
        error = content[0].get("text")
        logger.warning(
            "tool=%s outcome=error error=%s request_id=%s",
            tool_name,
            error,
            request_id,
            extra={"tool": tool_name, "request_id": request_id, "error": error},
        )
    else:
        logger.info(
            "tool=%s outcome=success request_id=%s",
            tool_name,
            request_id,
            extra={"tool": tool_name, "request_id": request_id},
        )


def create_app(
    config: Optional[MempoolConfig] = None,
    *,
    client: Optional[MempoolApiClient] = None,
) -> FastAPI:
    """Build the HTTP app bound to one upstream client."""
    config = config or load_default_config()
    api_client = client or MempoolApiClient(config)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await api_client.aclose()

    app = FastAPI(
        title="Mempool Mining MCP Server",
        description="Read-only Bitcoin mining statistics for LLM agents.",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.client = api_client

    @app.middleware("http")
    async def add_request_context(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health endpoint for monitoring."""
        return JSONResponse(content=HEALTH_STATUS)

    @app.get("/tools/{tool_name}")
    async def tool_route(tool_name: str, request: Request) -> JSONResponse:
        """Call a tool with query parameters as its arguments."""
        if tool_name not in mcp.TOOL_REGISTRY:
            return JSONResponse(status_code=404, content={"error": f"Unknown tool: {tool_name}"})
        result = (await mcp.call_tool(tool_name, dict(request.query_params), client=api_client)).to_dict()
        _log_tool_result(tool_name, result, getattr(request.state, "request_id", None))
        return JSONResponse(content=result)

    @app.post("/mcp")
    async def mcp_gateway(request: Request) -> Response:
        """JSON-RPC gateway for MCP clients."""
        request_id = getattr(request.state, "request_id", None)
        try:
            body = await request.json()
        except Exception:
            logger.debug("mcp parse error request_id=%s", request_id, extra={"request_id": request_id})
            return JSONResponse(status_code=400, content=rpc.error_payload(None, rpc.PARSE_ERROR, "Parse error"))

        if not isinstance(body, dict):
            return JSONResponse(
                status_code=400,
                content=rpc.error_payload(None, rpc.INVALID_REQUEST, "Invalid request"),
            )

        payload = await rpc.handle_message(body, client=api_client)
        if payload is None:
            # Notifications carry no response body.
            return Response(status_code=204)
        return JSONResponse(content=payload)

    return app


# Run with: uvicorn --factory mempool_mcp.server:create_app --reload
