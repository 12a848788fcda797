"""Test setup and cleanup mutations against the user-management tables."""

import logging
from datetime import timedelta
from secrets import token_hex

import bcrypt
from sqlalchemy.ext.asyncio import AsyncConnection

from userharness.config import Settings, settings
from userharness.database import ConnectionProvider, query_errors
from userharness.errors import AccountExistsError, AccountNotFoundError
from userharness.models import DEFAULT_ROLE, PasswordResetToken, VerificationToken, utc_now
from userharness.schemas import TokenInfo
from userharness.services import queries

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Bcrypt hash compatible with the library's password encoder."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


async def _exists(conn: AsyncConnection, email: str) -> bool:
    result = await conn.execute(queries.count_accounts(email))
    return bool(result.scalar_one())


class AccountFixtures:
    """Creates, resets and removes accounts for test preconditions.

    Every method runs in a single transaction and refuses to act on an
    account that does not exist, unlike ``VerificationSimulator`` which
    silently affects no rows.
    """

    def __init__(self, connections: ConnectionProvider, config: Settings | None = None) -> None:
        self.connections = connections
        self.config = config or settings

    async def create_account(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        enabled: bool | None = None,
    ) -> int:
        """Insert an account holding the default role and return its id.

        If the role table has no ``ROLE_USER`` row the account is still
        created, without any roles.
        """
        async with query_errors("create test user", email):
            async with self.connections.begin() as conn:
                if await _exists(conn, email):
                    raise AccountExistsError(email)
                result = await conn.execute(
                    queries.insert_account(
                        email=email,
                        password_hash=hash_password(password),
                        first_name=first_name if first_name is not None else "Test",
                        last_name=last_name if last_name is not None else "User",
                        enabled=enabled if enabled is not None else True,
                        registration_date=utc_now(),
                    )
                )
                account_id = result.scalar_one()

                role = (await conn.execute(queries.role_id(DEFAULT_ROLE))).scalar_one_or_none()
                if role is None:
                    logger.warning(
                        f"{DEFAULT_ROLE} not found in database, {email} will have no roles"
                    )
                else:
                    await conn.execute(queries.grant_role(email, role))

        logger.info(f"Created test user {email} (id={account_id})")
        return account_id

    async def delete_account(self, email: str) -> None:
        """Delete an account with its profile, role grants and tokens."""
        async with query_errors("delete test user", email):
            async with self.connections.begin() as conn:
                if not await _exists(conn, email):
                    raise AccountNotFoundError(email)
                # Dependents first to satisfy the foreign keys
                await conn.execute(queries.delete_event_registrations(email))
                await conn.execute(queries.delete_profile(email))
                await conn.execute(queries.revoke_roles(email))
                await conn.execute(queries.delete_tokens(VerificationToken, email))
                await conn.execute(queries.delete_tokens(PasswordResetToken, email))
                await conn.execute(queries.delete_account(email))

        logger.info(f"Deleted test user {email}")

    async def enable_account(self, email: str) -> None:
        """Enable an account and consume its verification token."""
        async with query_errors("enable user", email):
            async with self.connections.begin() as conn:
                if not await _exists(conn, email):
                    raise AccountNotFoundError(email)
                await conn.execute(queries.enable_account(email))
                await conn.execute(queries.delete_tokens(VerificationToken, email))

        logger.info(f"Enabled user {email}")

    async def unlock_account(self, email: str) -> None:
        """Clear the lock flag, lock date and failed-login counter."""
        async with query_errors("unlock user", email):
            async with self.connections.begin() as conn:
                if not await _exists(conn, email):
                    raise AccountNotFoundError(email)
                await conn.execute(queries.unlock_account(email))

        logger.info(f"Unlocked user {email}")

    async def issue_verification_token(self, email: str) -> TokenInfo:
        """Replace the account's verification token with a fresh one."""
        token = token_hex(32)
        expiry_date = utc_now() + timedelta(
            minutes=self.config.verification_token_expiration_minutes
        )

        async with query_errors("create verification token", email):
            async with self.connections.begin() as conn:
                if not await _exists(conn, email):
                    raise AccountNotFoundError(email)
                await conn.execute(queries.delete_tokens(VerificationToken, email))
                await conn.execute(
                    queries.insert_token(VerificationToken, email, token, expiry_date)
                )

        logger.info(f"Issued verification token for {email}")
        return TokenInfo(token=token, expiry_date=expiry_date)
