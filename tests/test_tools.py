import json
from typing import Any

import httpx
import pytest
from fastmcp import Client, FastMCP

from iris.client import IrisGateway
from iris.tools import IrisToolDependencies, register_iris_tools


def _build_mcp(handler: Any) -> FastMCP:
    gateway = IrisGateway(
        httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        "http://mock.local/iris",
    )
    dependencies = IrisToolDependencies()
    dependencies.attach_gateway(gateway)
    mcp = FastMCP(name="iris-test")
    register_iris_tools(mcp, dependencies)
    return mcp


def test_require_gateway_before_attach() -> None:
    with pytest.raises(RuntimeError):
        IrisToolDependencies().require_gateway()


@pytest.mark.anyio
async def test_create_payouts_tool_returns_reference_numbers() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            201, json={"payouts": [{"status": "queued", "reference_no": "ref-1"}]}
        )

    async with Client(_build_mcp(handler)) as client:
        result = await client.call_tool(
            "create_payouts",
            {
                "payouts": [
                    {
                        "beneficiary_name": "John Doe",
                        "beneficiary_account": "1234567890",
                        "beneficiary_bank": "bca",
                        "amount": "100000.00",
                        "notes": "Refund 42",
                    }
                ]
            },
        )
    assert result.structured_content == {
        "payouts": [{"status": "queued", "reference_no": "ref-1"}]
    }


@pytest.mark.anyio
async def test_create_beneficiary_tool_reports_domain_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "queued", "errors": ["duplicate alias"]})

    async with Client(_build_mcp(handler)) as client:
        result = await client.call_tool(
            "create_beneficiary",
            {"name": "John Doe", "bank": "bca", "account": "1234567890", "alias_name": "johndoe"},
        )
    assert result.structured_content["error"] == "duplicate alias"
    assert result.structured_content["response"]["status"] == "queued"


@pytest.mark.anyio
async def test_approve_payouts_tool_reports_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="Unauthorized")

    async with Client(_build_mcp(handler)) as client:
        result = await client.call_tool("approve_payouts", {"reference_nos": ["ref-1"]})
    assert "401" in result.structured_content["error"]


@pytest.mark.anyio
async def test_list_beneficiary_banks_tool() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/iris/api/v1/beneficiary_banks"
        return httpx.Response(
            200, json={"beneficiary_banks": [{"code": "bca", "name": "Bank Central Asia"}]}
        )

    async with Client(_build_mcp(handler)) as client:
        result = await client.call_tool("list_beneficiary_banks", {})
    assert result.structured_content == {
        "beneficiary_banks": [{"code": "bca", "name": "Bank Central Asia"}]
    }


@pytest.mark.anyio
async def test_update_beneficiary_tool_returns_new_alias() -> None:
    seen: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["payload"] = json.loads(request.content.decode())
        return httpx.Response(200, json={"status": "updated"})

    async with Client(_build_mcp(handler)) as client:
        result = await client.call_tool(
            "update_beneficiary",
            {
                "alias_name": "johndoe",
                "name": "John Doe",
                "bank": "bni",
                "account": "0987654321",
                "new_alias_name": "johnd",
            },
        )
    assert result.structured_content == {"alias_name": "johnd", "updated": True}
    assert seen["method"] == "PATCH"
    assert seen["path"] == "/iris/api/v1/beneficiaries/johndoe"
    assert seen["payload"]["alias_name"] == "johnd"


@pytest.mark.anyio
async def test_list_beneficiaries_tool() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                {
                    "name": "John Doe",
                    "bank": "bca",
                    "account": "1234567890",
                    "alias_name": "johndoe",
                    "email": None,
                }
            ],
        )

    async with Client(_build_mcp(handler)) as client:
        result = await client.call_tool("list_beneficiaries", {})
    assert result.structured_content == {
        "beneficiaries": [
            {
                "name": "John Doe",
                "bank": "bca",
                "account": "1234567890",
                "alias_name": "johndoe",
                "email": "",
            }
        ]
    }
