"""
IRIS payouts gateway.

Typed helper methods for each IRIS endpoint. Transport failures and business
rejections are both raised as IrisApiError subclasses and logged on the way out.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from iris.http_client import create_iris_client
from iris.models import (
    ApprovePayoutRequest,
    ApprovePayoutResponse,
    BeneficiariesResponse,
    Beneficiary,
    BeneficiaryBanksResponse,
    CreatePayoutRequest,
    CreatePayoutResponse,
)
from iris.settings import Settings

logger = logging.getLogger(__name__)

APPROVAL_STATUS_NOT_OK = "Error approving payouts, status from API not OK"


class IrisApiError(RuntimeError):
    """Base class for failures surfaced by the IRIS gateway."""


class IrisTransportError(IrisApiError):
    """The API could not be reached or answered with an unusable response."""


class IrisDomainError(IrisApiError):
    """The API answered, but rejected the request."""

    def __init__(self, message: str, response: BaseModel | None = None) -> None:
        super().__init__(message)
        self.response = response


@dataclass(slots=True)
class IrisGateway:
    """Typed wrapper around the shared AsyncClient for the IRIS endpoints."""

    _client: httpx.AsyncClient
    _base_url: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "IrisGateway":
        """Factory that builds the gateway from Settings."""
        return cls(create_iris_client(settings), settings.iris_url)

    async def aclose(self) -> None:
        """Close the underlying HTTP resources."""
        await self._client.aclose()

    def build_url(self, path: str) -> str:
        """Resolve a relative IRIS path against the environment base URL."""
        if not path.startswith("/"):
            path = "/" + path
        return self._base_url.rstrip("/") + path

    async def get_list_beneficiary_banks(self) -> BeneficiaryBanksResponse:
        """List the banks IRIS can pay out to."""
        try:
            data = await self._request("GET", "api/v1/beneficiary_banks")
            return _decode(BeneficiaryBanksResponse, data)
        except IrisTransportError as exc:
            logger.error("Error getting beneficiary banks: %s", exc)
            raise

    async def create_beneficiaries(self, beneficiary: Beneficiary) -> bool:
        """Register a new beneficiary; returns True once IRIS reports it created."""
        try:
            data = await self._request(
                "POST", "api/v1/beneficiaries", json=beneficiary.to_payload()
            )
            response = _decode(BeneficiariesResponse, data)
        except IrisTransportError as exc:
            logger.error("Error creating beneficiaries: %s", exc)
            raise

        if response.status != "created":
            logger.warning(
                "Error creating beneficiaries: %s",
                response.errors,
                extra={"status": response.status, "alias_name": beneficiary.alias_name},
            )
            raise IrisDomainError(",".join(response.errors or []), response)

        return True

    async def update_beneficiaries(self, alias_name: str, beneficiary: Beneficiary) -> bool:
        """Update the beneficiary registered under alias_name."""
        try:
            data = await self._request(
                "PATCH",
                f"api/v1/beneficiaries/{alias_name}",
                json=beneficiary.to_payload(),
            )
            response = _decode(BeneficiariesResponse, data)
        except IrisTransportError as exc:
            logger.error("Error updating beneficiaries: %s", exc)
            raise

        if response.status != "updated":
            logger.warning(
                "Error updating beneficiaries: %s",
                response.errors,
                extra={"status": response.status, "alias_name": alias_name},
            )
            raise IrisDomainError(",".join(response.errors or []), response)

        return True

    async def get_list_beneficiaries(self) -> list[Beneficiary]:
        try:
            data = await self._request("GET", "api/v1/beneficiaries")
            if not isinstance(data, list):
                raise IrisTransportError(
                    "IRIS API returned a non-list body for GET /api/v1/beneficiaries."
                )
            return [_decode(Beneficiary, item) for item in data]
        except IrisTransportError as exc:
            logger.error("Error get list beneficiaries: %s", exc)
            raise

    async def create_payouts(self, request: CreatePayoutRequest) -> CreatePayoutResponse:
        """
        Create one or more payouts in a single call.

        Per-item statuses in the returned response are left to the caller; only a
        top-level error_message is treated as a failure.
        """
        try:
            data = await self._request("POST", "api/v1/payouts", json=request.to_payload())
            response = _decode(CreatePayoutResponse, data)
        except IrisTransportError as exc:
            logger.error("Error creating payouts: %s", exc)
            raise

        if response.error_message:
            logger.warning(
                "Error creating payouts: %s",
                response.error_message,
                extra={"errors": response.errors},
            )
            raise IrisDomainError(response.error_message, response)

        return response

    async def approve_payouts(self, request: ApprovePayoutRequest) -> ApprovePayoutResponse:
        """Approve a batch of payouts by reference number."""
        try:
            data = await self._request(
                "POST", "api/v1/payouts/approve", json=request.to_payload()
            )
            response = _decode(ApprovePayoutResponse, data)
        except IrisTransportError as exc:
            logger.error("Error approving payouts: %s", exc)
            raise

        if response.errors:
            logger.warning(
                "Error approving payouts: %s",
                response.errors,
                extra={"reference_nos": request.reference_nos},
            )
            raise IrisDomainError(", ".join(response.errors), response)

        if response.status != "ok":
            logger.warning(
                APPROVAL_STATUS_NOT_OK,
                extra={"status": response.status, "reference_nos": request.reference_nos},
            )
            raise IrisDomainError(APPROVAL_STATUS_NOT_OK, response)

        return response

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Normalized request handler for all outgoing IRIS calls."""
        url = self.build_url(path)

        def _transport_error(message: str, *, exc: Exception | None = None) -> IrisTransportError:
            logger.error(
                message,
                extra={"method": method, "url": url},
                exc_info=exc,
            )
            return IrisTransportError(message)

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise _transport_error(
                f"IRIS API request timed out ({method} {url}).",
                exc=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise _transport_error(
                f"IRIS API request failed ({method} {url}): {exc!s}",
                exc=exc,
            ) from exc

        if response.is_error:
            snippet = response.text.strip()
            if len(snippet) > 512:
                snippet = f"{snippet[:512]}..."
            logger.warning(
                "IRIS API responded with error",
                extra={
                    "method": method,
                    "url": url,
                    "status_code": response.status_code,
                    "content": snippet,
                },
            )
            raise IrisTransportError(
                f"IRIS API error ({response.status_code}) during {method} {url}: {snippet or 'no body provided.'}"
            )

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise _transport_error(
                f"IRIS API returned invalid JSON during {method} {url}.",
                exc=exc,
            ) from exc


def _decode(model: type[BaseModel], data: Any) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise IrisTransportError(
            f"IRIS API response did not match {model.__name__}: {exc.error_count()} invalid field(s)."
        ) from exc
