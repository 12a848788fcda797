"""Shared columns for the user-management tables."""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, DateTime, Integer
from sqlmodel import Field, SQLModel


# SQLite only autoincrements INTEGER PRIMARY KEY columns
ID_TYPE = BigInteger().with_variant(Integer, "sqlite")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class TokenMixin(SQLModel):
    """Columns shared by the verification and password reset token tables."""

    id: int | None = Field(
        default=None,
        primary_key=True,
        sa_type=ID_TYPE,  # type: ignore[call-overload]
    )
    token: str | None = Field(default=None, index=True, max_length=255)
    expiry_date: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore[call-overload]
        description="Token expiration time",
    )
