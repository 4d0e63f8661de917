"""
Stdio transport: newline-delimited JSON-RPC over stdin/stdout.

The transport owns the stdout stream for the lifetime of a session. While a
session runs, ``sys.stdout`` is redirected to stderr so that stray prints
from any library land in the diagnostic stream instead of between protocol
frames. The redirection is undone when the session ends.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sys
from typing import IO, Any, Dict, Optional, Set

from mempool_mcp import rpc
from mempool_mcp.mempool_api import MempoolApiClient, default_client

logger = logging.getLogger(__name__)


class StdioTransport:
    def __init__(
        self,
        client: MempoolApiClient = default_client,
        *,
        reader: Optional[IO[str]] = None,
        writer: Optional[IO[str]] = None,
        diagnostics: Optional[IO[str]] = None,
    ) -> None:
        self.client = client
        self._reader = reader if reader is not None else sys.stdin
        self._writer = writer if writer is not None else sys.stdout
        self._diagnostics = diagnostics if diagnostics is not None else sys.stderr
        self._write_lock = asyncio.Lock()
        self._pending: Set[asyncio.Task] = set()

    async def _send(self, payload: Dict[str, Any]) -> None:
        frame = json.dumps(payload, ensure_ascii=False)
        async with self._write_lock:
            self._writer.write(frame + "\n")
            self._writer.flush()

    async def _handle_line(self, line: str) -> None:
        try:
            body = json.loads(line)
        except ValueError:
            logger.debug("stdio parse error")
            await self._send(rpc.error_payload(None, rpc.PARSE_ERROR, "Parse error"))
            return
        try:
            payload = await rpc.handle_message(body, client=self.client)
        except Exception:
            logger.exception("Unexpected error handling message")
            rpc_id = body.get("id") if isinstance(body, dict) else None
            payload = rpc.error_payload(rpc_id, rpc.INTERNAL_ERROR, "Internal error")
        if payload is not None:
            await self._send(payload)

    def _spawn(self, line: str) -> None:
        task = asyncio.create_task(self._handle_line(line))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def serve(self) -> None:
        """Process messages until stdin reaches EOF, then drain in-flight calls."""
        logger.info("Mempool MCP server is running on stdio.")
        with contextlib.redirect_stdout(self._diagnostics):
            while True:
                line = await asyncio.to_thread(self._reader.readline)
                if not line:
                    break
                line = line.strip()
                if not line:
                    continue
                self._spawn(line)
            if self._pending:
                await asyncio.gather(*list(self._pending))
        logger.info("stdin closed; stdio session finished.")


async def run_stdio(client: MempoolApiClient = default_client) -> None:
    transport = StdioTransport(client)
    try:
        await transport.serve()
    finally:
        await client.aclose()
