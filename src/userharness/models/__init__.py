"""SQLModel mirrors of the user-management tables."""

from userharness.models.account import UserAccount
from userharness.models.base import TokenMixin, utc_now
from userharness.models.profile import EventRegistration, UserProfile
from userharness.models.roles import DEFAULT_ROLE, Role, UserRole
from userharness.models.tokens import PasswordResetToken, VerificationToken

__all__ = [
    "DEFAULT_ROLE",
    "EventRegistration",
    "PasswordResetToken",
    "Role",
    "TokenMixin",
    "UserAccount",
    "UserProfile",
    "UserRole",
    "VerificationToken",
    "utc_now",
]
