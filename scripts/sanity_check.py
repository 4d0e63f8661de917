"""Minimal live sanity checks for the mempool mining tools."""

from __future__ import annotations

import asyncio
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from mempool_mcp.config import resolve_config  # noqa: E402
from mempool_mcp.mcp import call_tool  # noqa: E402
from mempool_mcp.mempool_api import MempoolApiClient  # noqa: E402

# Override via env to point at another pool.
SAMPLE_SLUG = os.getenv("MEMPOOL_SAMPLE_SLUG", "foundryusa")


def _preview(text: str, lines: int = 8) -> str:
    return "\n".join(text.splitlines()[:lines])


async def main() -> None:
    client = MempoolApiClient(resolve_config())
    try:
        for name, params in (
            ("get_hashrate", {}),
            ("get_mining_pools", {"timePeriod": "24h"}),
            ("get_mining_pool", {"slug": SAMPLE_SLUG}),
            ("get_mining_pool_blocks", {"slug": SAMPLE_SLUG}),
        ):
            result = await call_tool(name, params, client=client)
            status = "error" if result.is_error else "ok"
            print(f"{name} [{status}]:\n{_preview(result.first_text)}\n")
    finally:
        await client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
