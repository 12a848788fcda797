"""Email verification shortcuts for tests that skip the mail pipeline."""

import logging

from userharness.config import Settings, settings
from userharness.database import ConnectionProvider, query_errors
from userharness.errors import MissingTokenError
from userharness.models import VerificationToken
from userharness.schemas import TokenInfo
from userharness.services import queries

logger = logging.getLogger(__name__)


class VerificationSimulator:
    """Emulates the side effects of clicking a registration confirmation link."""

    def __init__(self, connections: ConnectionProvider, config: Settings | None = None) -> None:
        self.connections = connections
        self.config = config or settings

    async def get_token_info(self, email: str) -> TokenInfo | None:
        """Active verification token and its expiry, if any."""
        async with query_errors("get verification token", email):
            async with self.connections.open() as conn:
                result = await conn.execute(queries.select_token(VerificationToken, email))
                row = result.first()

        if row is None or row.token is None:
            return None
        return TokenInfo(token=row.token, expiry_date=row.expiry_date)

    async def get_token(self, email: str) -> str | None:
        """Active verification token for the account, if any.

        This is what a real test would extract from the confirmation email.
        """
        info = await self.get_token_info(email)
        return info.token if info else None

    async def simulate_verification(self, email: str) -> None:
        """Enable the account and consume its verification token.

        Both changes commit together. Unknown emails and already-consumed
        tokens affect no rows and raise nothing.
        """
        async with query_errors("simulate email verification", email):
            async with self.connections.begin() as conn:
                enabled = await conn.execute(queries.enable_account(email))
                consumed = await conn.execute(queries.delete_tokens(VerificationToken, email))

        logger.info(
            f"Simulated verification for {email} "
            f"(enabled={enabled.rowcount}, tokens consumed={consumed.rowcount})"
        )

    def verification_url(self, token: str) -> str:
        """Confirmation URL for a given token value."""
        base = self.config.app_base_url.rstrip("/")
        return f"{base}{self.config.verification_path}?token={token}"

    async def build_verification_url(self, email: str) -> str:
        """Confirmation URL embedding the account's current token."""
        token = await self.get_token(email)
        if token is None:
            raise MissingTokenError(email)
        return self.verification_url(token)

    def build_invalid_verification_url(self) -> str:
        """Confirmation URL for a token that never exists."""
        return self.verification_url(self.config.invalid_verification_token)
