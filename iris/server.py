"""
Core server bootstrap for the IRIS payouts MCP server.

Wires up the fastmcp instance, the IRIS gateway and the payout tools.
"""

import asyncio
import logging

from fastmcp import FastMCP  # type: ignore[import-not-found]

from iris.client import IrisGateway
from iris.settings import Settings
from iris.tools import IrisToolDependencies, register_iris_tools


class ServerApp:
    """Owns the gateway lifecycle and the MCP application."""

    def __init__(self, settings: Settings) -> None:
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._gateway: IrisGateway | None = None
        self._tool_dependencies = IrisToolDependencies()
        self._mcp_app = FastMCP(
            name="IRIS Payouts MCP Server",
            instructions=(
                "Look up banks, manage beneficiaries, then create and approve payouts through Midtrans IRIS."
            ),
        )
        register_iris_tools(self._mcp_app, self._tool_dependencies)

    def startup(self, gateway: IrisGateway | None = None) -> None:
        """Prepare resources required to launch the SSE server.

        A pre-built gateway may be injected; otherwise one is created from settings.
        """
        self._logger.info(
            "Starting server bootstrap",
            extra={"environment": self._settings.environment.value},
        )
        self._gateway = gateway or IrisGateway.from_settings(self._settings)
        self._tool_dependencies.attach_gateway(self._gateway)

    def shutdown(self) -> None:
        """Release acquired resources."""
        asyncio.run(self.ashutdown())

    async def ashutdown(self) -> None:
        """Release acquired resources from inside a running event loop."""
        self._logger.info("Shutting down server bootstrap")
        if self._gateway is not None:
            await self._gateway.aclose()
            self._gateway = None
        self._tool_dependencies.detach_gateway()

    def serve_forever(self) -> None:
        """Run the FastMCP SSE server until interrupted."""
        host = "0.0.0.0"
        port = self._settings.mcp_sse_port
        self._logger.info("Starting SSE transport", extra={"host": host, "port": port})
        self._mcp_app.run(transport="sse", host=host, port=port)

    async def serve_sse_async(self, host: str = "0.0.0.0") -> None:
        """Async helper for running the SSE transport (used by smoke tests)."""
        await self._mcp_app.run_http_async(
            transport="sse",
            host=host,
            port=self._settings.mcp_sse_port,
        )

    @property
    def mcp(self) -> FastMCP:
        """Expose the configured FastMCP instance."""
        return self._mcp_app


def build_server(settings: Settings) -> ServerApp:
    """Factory used by main.py to create the configured server instance."""
    return ServerApp(settings)
