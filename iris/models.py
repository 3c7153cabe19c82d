"""Request and response shapes for the IRIS payouts API.

Field names mirror the upstream JSON exactly; they are a wire contract.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _IrisModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_null_strings(cls, data: Any) -> Any:
        # null on a defaulted string field decodes to the default, as if absent.
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if value is not None
            or key not in cls.model_fields
            or not isinstance(cls.model_fields[key].default, str)
        }

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body sent over the wire."""
        return self.model_dump(mode="json", exclude_none=True)


class BeneficiaryBank(_IrisModel):
    code: str = ""
    name: str = ""


class BeneficiaryBanksResponse(_IrisModel):
    beneficiary_banks: list[BeneficiaryBank] = Field(default_factory=list)
    status_code: str | None = None


class Beneficiary(_IrisModel):
    """A bank account registered as a payout recipient, keyed by alias_name."""

    name: str
    bank: str
    account: str
    alias_name: str
    email: str = ""


class BeneficiariesResponse(_IrisModel):
    status: str = ""
    errors: list[str] | None = None


class PayoutItem(_IrisModel):
    beneficiary_name: str
    beneficiary_account: str
    beneficiary_bank: str
    beneficiary_email: str | None = None
    amount: str
    notes: str = ""


class CreatePayoutRequest(_IrisModel):
    payouts: list[PayoutItem] = Field(min_length=1)


class PayoutResult(_IrisModel):
    status: str = ""
    reference_no: str = ""


class CreatePayoutResponse(_IrisModel):
    payouts: list[PayoutResult] = Field(default_factory=list)
    error_message: str | None = None
    # Shape varies between validation and processing failures.
    errors: Any = None


class ApprovePayoutRequest(_IrisModel):
    reference_nos: list[str] = Field(min_length=1)
    otp: str | None = None


class ApprovePayoutResponse(_IrisModel):
    status: str = ""
    errors: list[str] | None = None
