import httpx
import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from iris.client import IrisGateway
from iris.server import build_server
from iris.settings import Settings


@pytest.mark.anyio
async def test_startup_uses_injected_gateway_and_shutdown_closes_it() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/iris/api/v1/payouts/approve"
        return httpx.Response(202, json={"status": "ok"})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    server = build_server(Settings(server_key="key"))
    server.startup(IrisGateway(async_client, "http://mock.local/iris"))

    async with Client(server.mcp) as client:
        result = await client.call_tool("approve_payouts", {"reference_nos": ["ref-1"]})
    assert result.structured_content == {"status": "ok", "reference_nos": ["ref-1"]}

    await server.ashutdown()
    assert async_client.is_closed

    async with Client(server.mcp) as client:
        with pytest.raises(ToolError, match="not initialized"):
            await client.call_tool("list_beneficiaries", {})
