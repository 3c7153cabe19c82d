"""Environment-driven configuration utilities for the IRIS payouts client."""

import os
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv


class Environment(str, Enum):
    """IRIS deployment targets."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @property
    def iris_url(self) -> str:
        if self is Environment.PRODUCTION:
            return "https://app.midtrans.com/iris"
        return "https://app.sandbox.midtrans.com/iris"


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for runtime configuration."""

    server_key: str
    environment: Environment = Environment.SANDBOX
    api_timeout: float = 30.0
    mcp_sse_port: int = 8000

    @property
    def iris_url(self) -> str:
        return self.environment.iris_url

    @classmethod
    def load(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can rely on a local .env file without
        exporting the IRIS key globally.
        """
        load_dotenv()

        server_key = os.getenv("IRIS_SERVER_KEY", "").strip()
        if not server_key:
            raise ValueError("IRIS_SERVER_KEY is required but was not provided.")

        environment_raw = os.getenv("IRIS_ENVIRONMENT", "").strip().lower() or "sandbox"
        try:
            environment = Environment(environment_raw)
        except ValueError as exc:
            raise ValueError("IRIS_ENVIRONMENT must be 'sandbox' or 'production'.") from exc

        api_timeout_raw = os.getenv("API_TIMEOUT", "").strip() or "30"
        try:
            api_timeout = float(api_timeout_raw)
        except ValueError as exc:
            raise ValueError("API_TIMEOUT must be a numeric value.") from exc
        if api_timeout <= 0:
            raise ValueError("API_TIMEOUT must be greater than zero.")

        mcp_sse_port_raw = os.getenv("MCP_SSE_PORT", "").strip() or "8000"
        try:
            mcp_sse_port = int(mcp_sse_port_raw)
        except ValueError as exc:
            raise ValueError("MCP_SSE_PORT must be an integer.") from exc
        if mcp_sse_port <= 0:
            raise ValueError("MCP_SSE_PORT must be greater than zero.")

        return cls(
            server_key=server_key,
            environment=environment,
            api_timeout=api_timeout,
            mcp_sse_port=mcp_sse_port,
        )
