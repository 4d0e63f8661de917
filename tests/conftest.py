import json
import os
import sys
from typing import Callable, List

import httpx
import pytest
import pytest_asyncio

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from mempool_mcp.config import MempoolConfig  # noqa: E402
from mempool_mcp.mempool_api import MempoolApiClient  # noqa: E402

BASE_URL = "http://mempool.test/api"


class RecordingUpstream:
    """Mock upstream that records every requested URL."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def urls(self) -> List[str]:
        return [str(request.url) for request in self.requests]


def json_responder(payload, status_code: int = 200):
    def respond(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(payload).encode())

    return respond


@pytest.fixture
def upstream():
    return RecordingUpstream(json_responder({"hashrate": 123}))


@pytest_asyncio.fixture
async def api_client(upstream):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as httpx_client:
        yield MempoolApiClient(MempoolConfig(base_url=BASE_URL), async_client=httpx_client)
