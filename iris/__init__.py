"""
Midtrans IRIS payouts client and MCP server.

The gateway lives in iris.client; iris.server exposes it as MCP tools.
"""

from iris.client import IrisApiError, IrisDomainError, IrisGateway, IrisTransportError

__all__ = ["IrisApiError", "IrisDomainError", "IrisGateway", "IrisTransportError"]
