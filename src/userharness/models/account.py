"""Account model mirroring the user-management library's user table."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from userharness.models.base import ID_TYPE


class UserAccount(SQLModel, table=True):
    """A registered user, keyed by email.

    The table is owned by the system under test; the harness only reads it
    and applies the handful of mutations tests need.
    """

    __tablename__ = "user_account"

    id: int | None = Field(
        default=None,
        primary_key=True,
        sa_type=ID_TYPE,  # type: ignore[call-overload]
    )
    email: str = Field(unique=True, index=True, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=255)
    enabled: bool = Field(default=False)
    locked: bool = Field(default=False)
    failed_login_attempts: int = Field(default=0)
    locked_date: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore[call-overload]
    )
    registration_date: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore[call-overload]
    )
