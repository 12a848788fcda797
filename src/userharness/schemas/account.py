"""Account state snapshots."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AccountDetails(BaseModel):
    """Point-in-time snapshot of one account row."""

    model_config = ConfigDict(frozen=True)

    first_name: str | None
    last_name: str | None
    enabled: bool
    locked: bool
    failed_login_attempts: int


class TokenInfo(BaseModel):
    """A persisted token and its expiry."""

    token: str
    expiry_date: datetime | None = None


class CreateAccountRequest(BaseModel):
    """Request body for creating a test account.

    Accepts the camelCase names browser-side test clients send.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(min_length=1)
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    enabled: bool | None = None
