"""Account inventory models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AccountRecord(BaseModel):
    """One account/region pair the CLI operates on."""

    # ``account_id`` appears in older inventory files; the role ARN already
    # identifies the account so unknown keys are ignored.
    model_config = ConfigDict(frozen=True, extra="ignore")

    namespace: str = Field(description="Logical program name, not unique")
    region: str = Field(description="Free-form region, resolved at call time")
    role_arn: str = Field(description="IAM role assumed for this account")


class AccountsConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    account: tuple[AccountRecord, ...]


AccountInventory = tuple[AccountRecord, ...]
