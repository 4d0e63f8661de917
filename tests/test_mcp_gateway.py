import httpx
import pytest
from fastapi.testclient import TestClient

from mempool_mcp.config import MempoolConfig
from mempool_mcp.mempool_api import MempoolApiClient
from mempool_mcp.rpc import MCP_SERVER_NAME, MCP_SERVER_VERSION
from mempool_mcp.server import create_app

from conftest import BASE_URL


@pytest.fixture
def client(upstream):
    api_client = MempoolApiClient(
        MempoolConfig(base_url=BASE_URL),
        async_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)),
    )
    app = create_app(MempoolConfig(base_url=BASE_URL), client=api_client)
    return TestClient(app)


def test_health_endpoint(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json().get("status") == "ok"
    assert resp.headers.get("X-Request-ID")


def test_mcp_initialize(client):
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 10,
            "method": "initialize",
            "params": {
                "protocolVersion": "2025-03-26",
                "capabilities": {},
                "clientInfo": {"name": "test-client", "version": "0.0.0"},
            },
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == 10
    result = data["result"]
    assert result["protocolVersion"] == "2025-03-26"
    assert result["serverInfo"] == {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION}
    assert result["capabilities"]["tools"]["listChanged"] is False


def test_mcp_initialize_requires_protocol_version(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "initialize"})
    assert resp.json()["error"]["code"] == -32602


def test_mcp_tools_list(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 3, "method": "tools/list"})
    assert resp.status_code == 200
    tools = resp.json()["result"]["tools"]
    assert len(tools) == 6
    hashrate = next(t for t in tools if t["name"] == "get_hashrate")
    assert hashrate["inputSchema"]["type"] == "object"


def test_mcp_list_tools_alias(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "list_tools"})
    assert resp.json()["id"] == 1
    assert any(tool["name"] == "get_mining_pools" for tool in resp.json()["result"]["tools"])


def test_mcp_tools_call_get_hashrate(client, upstream):
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": "get_hashrate", "arguments": {}}},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == 4
    assert data["result"] == {"content": [{"type": "text", "text": "hashrate: 123\n"}]}
    assert upstream.urls == [f"{BASE_URL}/v1/mining/hashrate/1m"]


def test_mcp_call_tool_alias_with_params_key(client, upstream):
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 5,
            "method": "call_tool",
            "params": {"tool": "get_mining_pool_blocks", "params": {"slug": "luxor", "blockHeight": 730000}},
        },
    )
    assert "isError" not in resp.json()["result"]
    assert upstream.urls == [f"{BASE_URL}/v1/mining/pool/luxor/blocks/730000"]


def test_mcp_tools_call_missing_required_is_in_band_error(client, upstream):
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 6, "method": "tools/call", "params": {"name": "get_mining_pool"}},
    )
    result = resp.json()["result"]
    assert result["isError"] is True
    assert len(result["content"]) == 1
    assert upstream.call_count == 0


def test_mcp_unknown_tool_is_in_band_error(client):
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 7, "method": "tools/call", "params": {"name": "nope"}},
    )
    result = resp.json()["result"]
    assert result["isError"] is True
    assert result["content"][0]["text"] == "Error fetching data: Unknown tool: nope"


def test_mcp_unknown_method_returns_error(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 7, "method": "not_a_real_method"})
    assert resp.status_code == 200
    assert resp.json()["error"]["code"] == -32601


def test_mcp_ping(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 8, "method": "ping"})
    assert resp.json() == {"jsonrpc": "2.0", "id": 8, "result": {}}


def test_mcp_invalid_params_type(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 11, "method": "tools/call", "params": []})
    assert resp.json()["error"]["code"] == -32602


def test_mcp_call_tool_missing_name_is_invalid_params(client):
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 13, "method": "tools/call", "params": {"arguments": {}}},
    )
    assert resp.json()["error"]["code"] == -32602


def test_mcp_parse_error_invalid_json(client):
    resp = client.post("/mcp", content="{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32700


def test_mcp_non_object_body_is_invalid_request(client):
    resp = client.post("/mcp", json=[1, 2])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32600


def test_mcp_missing_method_invalid_request(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 12})
    assert resp.json()["error"]["code"] == -32600


def test_mcp_initialized_notification_ignored(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert resp.status_code == 204
    assert resp.text == ""


def test_tool_route_uses_query_params(client, upstream):
    resp = client.get("/tools/get_mining_pool_blocks", params={"slug": "foundryusa", "blockHeight": "730000"})
    assert resp.status_code == 200
    assert resp.json() == {"content": [{"type": "text", "text": "hashrate: 123\n"}]}
    assert upstream.urls == [f"{BASE_URL}/v1/mining/pool/foundryusa/blocks/730000"]


def test_tool_route_unknown_tool_is_404(client, upstream):
    resp = client.get("/tools/nope")
    assert resp.status_code == 404
    assert upstream.call_count == 0


def test_tool_route_upstream_failure():
    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    api_client = MempoolApiClient(
        MempoolConfig(base_url=BASE_URL),
        async_client=httpx.AsyncClient(transport=httpx.MockTransport(refuse)),
    )
    client = TestClient(create_app(MempoolConfig(base_url=BASE_URL), client=api_client))
    resp = client.get("/tools/get_hashrate")
    assert resp.status_code == 200
    assert resp.json() == {
        "content": [{"type": "text", "text": "Error fetching data: Connection refused"}],
        "isError": True,
    }
