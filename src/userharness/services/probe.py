"""Read-only probes and composite assertions over account state."""

import logging

from sqlalchemy import Select

from userharness.database import ConnectionProvider, query_errors
from userharness.errors import AssertionFailure
from userharness.models import PasswordResetToken, VerificationToken
from userharness.schemas import AccountDetails, TokenInfo
from userharness.services import queries

logger = logging.getLogger(__name__)


class StateProbe:
    """Answers point-in-time questions about persisted accounts and tokens.

    Each method opens its own short-lived connection, so a probe can be
    shared freely between tests. Nothing here mutates state.

    Note that ``is_enabled`` and ``is_locked`` return False for an account
    that does not exist. Use ``account_exists`` first when the difference
    between "absent" and "disabled" matters.
    """

    def __init__(self, connections: ConnectionProvider) -> None:
        self.connections = connections

    async def _scalar(self, stmt: Select, action: str, email: str):
        async with query_errors(action, email):
            async with self.connections.open() as conn:
                result = await conn.execute(stmt)
                return result.scalar_one_or_none()

    async def account_exists(self, email: str) -> bool:
        """Check if exactly one account matches the email."""
        count = await self._scalar(queries.count_accounts(email), "check if user exists", email)
        logger.debug(f"Account {email} count={count}")
        return count == 1

    async def is_enabled(self, email: str) -> bool:
        """Stored enabled flag, or False if the account is absent."""
        enabled = await self._scalar(
            queries.account_enabled(email), "check if user is enabled", email
        )
        return bool(enabled)

    async def is_locked(self, email: str) -> bool:
        """Stored locked flag, or False if the account is absent."""
        locked = await self._scalar(queries.account_locked(email), "check if user is locked", email)
        return bool(locked)

    async def account_details(self, email: str) -> AccountDetails | None:
        """Snapshot of names, flags and failed-login count, or None."""
        async with query_errors("get user details", email):
            async with self.connections.open() as conn:
                result = await conn.execute(queries.account_details(email))
                row = result.mappings().first()

        if row is None:
            return None
        return AccountDetails(
            first_name=row["first_name"],
            last_name=row["last_name"],
            enabled=bool(row["enabled"]),
            locked=bool(row["locked"]),
            failed_login_attempts=row["failed_login_attempts"] or 0,
        )

    async def has_verification_token(self, email: str) -> bool:
        """Check if the account has a pending verification token."""
        count = await self._scalar(
            queries.count_tokens(VerificationToken, email), "check verification token", email
        )
        return bool(count)

    async def has_password_reset_token(self, email: str) -> bool:
        """Check if a password reset was started for the account."""
        count = await self._scalar(
            queries.count_tokens(PasswordResetToken, email), "check password reset token", email
        )
        return bool(count)

    async def get_password_reset_token(self, email: str) -> TokenInfo | None:
        """Current password reset token for the account, if any."""
        async with query_errors("get password reset token", email):
            async with self.connections.open() as conn:
                result = await conn.execute(queries.select_token(PasswordResetToken, email))
                row = result.first()

        if row is None or row.token is None:
            return None
        return TokenInfo(token=row.token, expiry_date=row.expiry_date)

    async def account_roles(self, email: str) -> list[str]:
        """Names of the roles granted to the account, sorted."""
        async with query_errors("get user roles", email):
            async with self.connections.open() as conn:
                result = await conn.execute(queries.account_roles(email))
                return list(result.scalars().all())

    # Composite assertions

    async def assert_registered(self, email: str, first_name: str, last_name: str) -> None:
        """Account exists with the given names and an unconsumed verification token."""
        if not await self.account_exists(email):
            raise AssertionFailure(f"User should exist after registration: {email}")

        details = await self._require_details(email)
        if details.first_name != first_name:
            raise AssertionFailure(
                f"First name mismatch. Expected: {first_name}, Actual: {details.first_name}"
            )
        if details.last_name != last_name:
            raise AssertionFailure(
                f"Last name mismatch. Expected: {last_name}, Actual: {details.last_name}"
            )

        if not await self.has_verification_token(email):
            raise AssertionFailure(f"Verification token should exist after registration: {email}")

    async def assert_email_verified(self, email: str) -> None:
        """Account is enabled and its verification token was consumed."""
        if not await self.is_enabled(email):
            raise AssertionFailure(f"User should be enabled after email verification: {email}")
        if await self.has_verification_token(email):
            raise AssertionFailure(
                f"Verification token should be consumed after verification: {email}"
            )

    async def assert_profile_updated(self, email: str, first_name: str, last_name: str) -> None:
        """Stored names equal the new values."""
        details = await self._require_details(email)
        if details.first_name != first_name:
            raise AssertionFailure(
                f"First name not updated. Expected: {first_name}, Actual: {details.first_name}"
            )
        if details.last_name != last_name:
            raise AssertionFailure(
                f"Last name not updated. Expected: {last_name}, Actual: {details.last_name}"
            )

    async def assert_account_deleted(self, email: str) -> None:
        """Account is gone, or soft-deleted by being disabled."""
        if await self.account_exists(email) and await self.is_enabled(email):
            raise AssertionFailure(f"User account should be deleted or disabled: {email}")

    async def assert_locked(self, email: str) -> None:
        """Account exists and is locked."""
        details = await self._require_details(email)
        if not details.locked:
            raise AssertionFailure(
                f"User should be locked: {email} "
                f"(failed login attempts: {details.failed_login_attempts})"
            )

    async def assert_unlocked(self, email: str) -> None:
        """Account exists and is not locked."""
        details = await self._require_details(email)
        if details.locked:
            raise AssertionFailure(
                f"User should not be locked: {email} "
                f"(failed login attempts: {details.failed_login_attempts})"
            )

    async def _require_details(self, email: str) -> AccountDetails:
        details = await self.account_details(email)
        if details is None:
            raise AssertionFailure(f"User not found: {email}")
        return details
