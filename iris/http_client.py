"""HTTP client factory for talking to the IRIS payouts API."""

import httpx

from iris.settings import Settings


def create_iris_client(settings: Settings) -> httpx.AsyncClient:
    """
    Build an AsyncClient carrying IRIS authentication and JSON headers.

    IRIS authenticates with HTTP Basic: the server key is the username and the
    password is empty. The base URL is resolved per request by the gateway.
    """
    return httpx.AsyncClient(
        auth=httpx.BasicAuth(settings.server_key, ""),
        headers={
            "Accept": "application/json",
            "Content-Type": "application/json",
        },
        timeout=settings.api_timeout,
    )
