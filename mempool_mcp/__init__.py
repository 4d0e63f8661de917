"""
Read-only mempool mining MCP server package.

This package exposes LLM-friendly tools backed by the mining endpoints of a
mempool.space-compatible HTTP API. See DESIGN.md for full details.
"""

__all__ = ["config"]
