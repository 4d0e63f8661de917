"""
Tool registry for the MCP surface.

Maps tool names to their declarative definitions, validates arguments and
forwards each call to the upstream client. Stateless: every call is an
independent round trip.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from mempool_mcp.mempool_api import ERROR_PREFIX, MempoolApiClient, ToolResult, default_client
from mempool_mcp.tools import MINING_TOOLS, ToolDefinition, ToolValidationError, validate_arguments

logger = logging.getLogger(__name__)


def _build_registry(definitions: Iterable[ToolDefinition]) -> Dict[str, ToolDefinition]:
    registry: Dict[str, ToolDefinition] = {}
    for definition in definitions:
        if definition.name in registry:
            raise ValueError(f"Duplicate tool name: {definition.name}")
        registry[definition.name] = definition
    return registry


TOOL_REGISTRY: Dict[str, ToolDefinition] = _build_registry(MINING_TOOLS)


def list_tools() -> List[Dict[str, Any]]:
    """Return the advertised tools in declaration order."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "inputSchema": tool.input_schema,
        }
        for tool in TOOL_REGISTRY.values()
    ]


def build_tool_url(tool_name: str, params: Optional[Dict[str, Any]], base_url: str) -> str:
    """Validate ``params`` for ``tool_name`` and return the upstream URL."""
    tool = TOOL_REGISTRY[tool_name]
    validated = validate_arguments(tool.params, params)
    return tool.build_url(base_url.rstrip("/"), validated)


async def call_tool(
    tool_name: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    client: MempoolApiClient = default_client,
) -> ToolResult:
    """Dispatch to a tool by name. Never raises."""
    if tool_name not in TOOL_REGISTRY:
        return ToolResult.error(f"{ERROR_PREFIX}Unknown tool: {tool_name}")
    try:
        url = build_tool_url(tool_name, params, client.base_url)
    except ToolValidationError as exc:
        logger.debug("tool=%s invalid params: %s", tool_name, exc)
        return ToolResult.error(f"{ERROR_PREFIX}Invalid parameters: {exc}")
    return await client.fetch_and_format(url)
