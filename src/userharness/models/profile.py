"""Demo application profile rows hanging off an account."""

from sqlmodel import Field, SQLModel

from userharness.models.base import ID_TYPE


class UserProfile(SQLModel, table=True):
    """Per-account profile, sharing the account's id as its key."""

    __tablename__ = "demo_user_profile"

    user_id: int = Field(foreign_key="user_account.id", primary_key=True)
    favorite_color: str | None = Field(default=None, max_length=255)
    receive_newsletter: bool = Field(default=False)


class EventRegistration(SQLModel, table=True):
    """Profile's sign-up for an event; removed along with the profile."""

    __tablename__ = "event_registrations"

    id: int | None = Field(
        default=None,
        primary_key=True,
        sa_type=ID_TYPE,  # type: ignore[call-overload]
    )
    user_profile_user_id: int = Field(foreign_key="demo_user_profile.user_id", index=True)
    event_id: int | None = Field(default=None)
