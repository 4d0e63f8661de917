"""
Minimal JSON-RPC 2.0 handling for MCP clients.

Supported methods:
  - initialize
  - ping
  - tools/list (alias list_tools)
  - tools/call (alias call_tool)
  - notifications/initialized, initialized (no response)

Shared by the HTTP and stdio transports; neither transport adds semantics.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from mempool_mcp import mcp
from mempool_mcp.config import APP_VERSION
from mempool_mcp.mempool_api import MempoolApiClient, default_client

logger = logging.getLogger(__name__)

MCP_SERVER_NAME = "mempool-mcp-server"
MCP_SERVER_VERSION = APP_VERSION

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

NOTIFICATION_METHODS = ("notifications/initialized", "initialized")


def success_payload(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def error_payload(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


async def handle_message(
    body: Any,
    *,
    client: MempoolApiClient = default_client,
) -> Optional[Dict[str, Any]]:
    """
    Handle one decoded JSON-RPC message.

    Returns:
        The response payload, or None for notifications.
    """
    if not isinstance(body, dict):
        return error_payload(None, INVALID_REQUEST, "Invalid request")

    method = body.get("method")
    rpc_id = body.get("id")
    raw_params = body.get("params")
    if raw_params is None:
        params: Dict[str, Any] = {}
    elif isinstance(raw_params, dict):
        params = raw_params
    else:
        return error_payload(rpc_id, INVALID_PARAMS, "Invalid params")

    if not method or not isinstance(method, str):
        return error_payload(rpc_id, INVALID_REQUEST, "Invalid request")

    if method in NOTIFICATION_METHODS or method.startswith("notifications/"):
        logger.debug("mcp notification received method=%s", method)
        return None

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        if not isinstance(protocol_version, str) or not protocol_version:
            return error_payload(rpc_id, INVALID_PARAMS, "Invalid params")
        logger.debug("mcp initialize requested protocol=%s", protocol_version)
        return success_payload(
            rpc_id,
            {
                "protocolVersion": protocol_version,
                "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
                "capabilities": {"tools": {"listChanged": False}, "logging": {}},
            },
        )

    if method == "ping":
        return success_payload(rpc_id, {})

    if method in ("list_tools", "tools/list"):
        return success_payload(rpc_id, {"tools": mcp.list_tools()})

    if method in ("call_tool", "tools/call"):
        tool_name = params.get("name") or params.get("tool")
        tool_params = params.get("arguments")
        if tool_params is None:
            tool_params = params.get("params") or {}
        if not isinstance(tool_name, str) or not tool_name.strip():
            return error_payload(rpc_id, INVALID_PARAMS, "Invalid params")
        if not isinstance(tool_params, dict):
            return error_payload(rpc_id, INVALID_PARAMS, "Invalid params")
        result = await mcp.call_tool(tool_name, tool_params, client=client)
        if result.is_error:
            logger.warning(
                "tool=%s outcome=error error=%s",
                tool_name,
                result.first_text,
                extra={"tool": tool_name, "error": result.first_text},
            )
        else:
            logger.info("tool=%s outcome=success", tool_name, extra={"tool": tool_name})
        return success_payload(rpc_id, result.to_dict())

    return error_payload(rpc_id, METHOD_NOT_FOUND, "Method not found")
