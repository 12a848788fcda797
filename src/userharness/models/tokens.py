"""Verification and password reset token models."""

from sqlmodel import Field

from userharness.models.base import TokenMixin


class VerificationToken(TokenMixin, table=True):
    """Registration email verification token, deleted once consumed."""

    __tablename__ = "verification_token"

    user_id: int = Field(foreign_key="user_account.id", index=True)


class PasswordResetToken(TokenMixin, table=True):
    """Password reset token, created when a reset flow starts."""

    __tablename__ = "password_reset_token"

    user_id: int = Field(foreign_key="user_account.id", index=True)
