"""MCP tool registrations for the IRIS payouts server."""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable

from fastmcp import Context, FastMCP
from pydantic import Field, ValidationError

from iris.client import IrisApiError, IrisDomainError, IrisGateway
from iris.models import ApprovePayoutRequest, Beneficiary, CreatePayoutRequest, PayoutItem

logger = logging.getLogger(__name__)


@dataclass
class IrisToolDependencies:
    """Runtime dependencies required by the MCP tools."""

    gateway: IrisGateway | None = None

    def attach_gateway(self, gateway: IrisGateway) -> None:
        self.gateway = gateway

    def detach_gateway(self) -> None:
        self.gateway = None

    def require_gateway(self) -> IrisGateway:
        if self.gateway is None:
            raise RuntimeError("IRIS gateway is not initialized.")
        return self.gateway


def register_iris_tools(
    mcp: FastMCP,
    dependencies: IrisToolDependencies,
) -> None:
    """Register MCP tools that proxy to the IRIS payouts API."""

    def _log_tool_event(tool_name: str, event: str, **fields: object) -> None:
        logger.info(
            "iris_tool_event",
            extra={"tool": tool_name, "event": event, **fields},
        )

    async def _with_error_handling(
        tool_name: str,
        action: Callable[[], Awaitable[dict[str, Any]]],
    ) -> dict[str, Any]:
        try:
            return await action()
        except IrisDomainError as exc:
            logger.warning("%s rejected by IRIS", tool_name)
            _log_tool_event(tool_name, "domain_error", error=str(exc))
            result: dict[str, Any] = {"error": str(exc)}
            if exc.response is not None:
                result["response"] = exc.response.model_dump(mode="json")
            return result
        except IrisApiError as exc:
            logger.warning("%s failed due to API error", tool_name, exc_info=True)
            _log_tool_event(tool_name, "api_error", error=str(exc))
            return {"error": str(exc)}
        except ValidationError as exc:
            _log_tool_event(tool_name, "invalid_input", error=str(exc))
            return {"error": f"Invalid input: {exc}"}
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s failed unexpectedly", tool_name)
            _log_tool_event(tool_name, "unexpected_error", error=str(exc))
            return {"error": f"Unexpected error: {exc}"}

    @mcp.tool(
        name="list_beneficiary_banks",
        description="Lists the banks supported by IRIS as payout destinations. Use the returned 'code' as the 'bank' of a beneficiary.",
    )
    async def list_beneficiary_banks() -> dict[str, Any]:
        gateway = dependencies.require_gateway()

        async def _call() -> dict[str, Any]:
            response = await gateway.get_list_beneficiary_banks()
            banks = [bank.model_dump() for bank in response.beneficiary_banks]
            _log_tool_event("list_beneficiary_banks", "success", count=len(banks))
            return {"beneficiary_banks": banks}

        return await _with_error_handling("list_beneficiary_banks", _call)

    @mcp.tool(
        name="create_beneficiary",
        description="Registers a bank account as a payout beneficiary under a unique alias name.",
    )
    async def create_beneficiary(
        name: Annotated[str, Field(description="Account holder name.")],
        bank: Annotated[str, Field(description="Bank code from list_beneficiary_banks (e.g., 'bca').")],
        account: Annotated[str, Field(description="Destination account number.")],
        alias_name: Annotated[str, Field(description="Unique alias used to reference this beneficiary later.")],
        email: Annotated[str, Field(description="Beneficiary email address.")] = "",
    ) -> dict[str, Any]:
        """Create a beneficiary and report whether IRIS accepted it."""

        gateway = dependencies.require_gateway()

        async def _call() -> dict[str, Any]:
            beneficiary = Beneficiary(
                name=name, bank=bank, account=account, alias_name=alias_name, email=email
            )
            created = await gateway.create_beneficiaries(beneficiary)
            _log_tool_event("create_beneficiary", "success", alias_name=alias_name)
            return {"alias_name": alias_name, "created": created}

        return await _with_error_handling("create_beneficiary", _call)

    @mcp.tool(
        name="update_beneficiary",
        description="Updates the beneficiary registered under 'alias_name'. The new alias may differ from the current one.",
    )
    async def update_beneficiary(
        alias_name: Annotated[str, Field(description="Current alias of the beneficiary to update.")],
        name: Annotated[str, Field(description="Account holder name.")],
        bank: Annotated[str, Field(description="Bank code from list_beneficiary_banks.")],
        account: Annotated[str, Field(description="Destination account number.")],
        new_alias_name: Annotated[str, Field(description="Alias to store; pass the current alias to keep it.")],
        email: Annotated[str, Field(description="Beneficiary email address.")] = "",
    ) -> dict[str, Any]:
        gateway = dependencies.require_gateway()

        async def _call() -> dict[str, Any]:
            beneficiary = Beneficiary(
                name=name, bank=bank, account=account, alias_name=new_alias_name, email=email
            )
            updated = await gateway.update_beneficiaries(alias_name, beneficiary)
            _log_tool_event("update_beneficiary", "success", alias_name=alias_name)
            return {"alias_name": new_alias_name, "updated": updated}

        return await _with_error_handling("update_beneficiary", _call)

    @mcp.tool(
        name="list_beneficiaries",
        description="Lists every beneficiary registered with IRIS.",
    )
    async def list_beneficiaries() -> dict[str, Any]:
        gateway = dependencies.require_gateway()

        async def _call() -> dict[str, Any]:
            beneficiaries = await gateway.get_list_beneficiaries()
            _log_tool_event("list_beneficiaries", "success", count=len(beneficiaries))
            return {"beneficiaries": [item.model_dump() for item in beneficiaries]}

        return await _with_error_handling("list_beneficiaries", _call)

    @mcp.tool(
        name="create_payouts",
        description="Creates one or more payouts. Each payout needs beneficiary_name, beneficiary_account, beneficiary_bank, amount (decimal string) and notes. Returns the reference_no of every payout, needed for approve_payouts.",
    )
    async def create_payouts(
        payouts: Annotated[list[PayoutItem], Field(description="Payout instructions to submit together.", min_length=1)],
        ctx: Context,
    ) -> dict[str, Any]:
        """Submit payouts and return their reference numbers and statuses."""

        gateway = dependencies.require_gateway()

        async def _call() -> dict[str, Any]:
            response = await gateway.create_payouts(CreatePayoutRequest(payouts=payouts))
            results = [item.model_dump() for item in response.payouts]
            await ctx.info(f"{len(results)} payout(s) created.")
            _log_tool_event(
                "create_payouts",
                "success",
                reference_nos=[item["reference_no"] for item in results],
            )
            return {"payouts": results}

        return await _with_error_handling("create_payouts", _call)

    @mcp.tool(
        name="approve_payouts",
        description="Approves previously created payouts by their reference numbers. Requires the approver OTP when the account enforces it.",
    )
    async def approve_payouts(
        reference_nos: Annotated[list[str], Field(description="reference_no values returned by create_payouts.", min_length=1)],
        otp: Annotated[str | None, Field(description="One-time password for approval, if required.")] = None,
    ) -> dict[str, Any]:
        gateway = dependencies.require_gateway()

        async def _call() -> dict[str, Any]:
            response = await gateway.approve_payouts(
                ApprovePayoutRequest(reference_nos=reference_nos, otp=otp)
            )
            _log_tool_event("approve_payouts", "success", reference_nos=reference_nos)
            return {"status": response.status, "reference_nos": reference_nos}

        return await _with_error_handling("approve_payouts", _call)

    logger.info("IRIS MCP tools registered.")
