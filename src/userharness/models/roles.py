"""Role and user-role join models."""

from sqlmodel import Field, SQLModel

from userharness.models.base import ID_TYPE

DEFAULT_ROLE = "ROLE_USER"


class Role(SQLModel, table=True):
    """Named authority granted to accounts, seeded by the system under test."""

    __tablename__ = "role"

    id: int | None = Field(
        default=None,
        primary_key=True,
        sa_type=ID_TYPE,  # type: ignore[call-overload]
    )
    name: str = Field(unique=True, max_length=255)
    description: str | None = Field(default=None, max_length=255)


class UserRole(SQLModel, table=True):
    """Join row linking an account to one of its roles."""

    __tablename__ = "users_roles"

    user_id: int = Field(foreign_key="user_account.id", primary_key=True)
    role_id: int = Field(foreign_key="role.id", primary_key=True)
