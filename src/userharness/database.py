"""Database engine and short-lived connection handling."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from userharness.config import settings
from userharness.errors import QueryFailure

logger = logging.getLogger(__name__)


class ConnectionProvider:
    """Opens short-lived connections against the user-management database.

    Every harness operation acquires its own connection and releases it
    before returning, on success and on error alike.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "ConnectionProvider":
        """Create a provider with its own engine.

        NullPool keeps nothing open between operations, so the harness never
        holds a connection the system under test might be waiting on.
        """
        return cls(create_async_engine(url, echo=echo, poolclass=NullPool))

    @classmethod
    def from_settings(cls) -> "ConnectionProvider":
        """Create a provider for the configured database."""
        url = settings.database_url_test if settings.is_test else settings.database_url
        return cls.from_url(url, echo=settings.database_echo)

    @asynccontextmanager
    async def open(self) -> AsyncGenerator[AsyncConnection, None]:
        """Open a connection for read-only statements."""
        async with self.engine.connect() as conn:
            yield conn

    @asynccontextmanager
    async def begin(self) -> AsyncGenerator[AsyncConnection, None]:
        """Open a connection inside a transaction.

        Commits when the block exits normally, rolls back if it raises.
        """
        async with self.engine.begin() as conn:
            yield conn

    async def dispose(self) -> None:
        """Release the underlying engine."""
        await self.engine.dispose()


_provider: ConnectionProvider | None = None


def get_provider() -> ConnectionProvider:
    """Get the process-wide connection provider, creating it on first use."""
    global _provider
    if _provider is None:
        _provider = ConnectionProvider.from_settings()
    return _provider


async def close_db() -> None:
    """Dispose the process-wide provider, if one was created."""
    global _provider
    if _provider is not None:
        await _provider.dispose()
        _provider = None


@asynccontextmanager
async def query_errors(action: str, email: str | None = None) -> AsyncGenerator[None, None]:
    """Re-raise database errors as QueryFailure with the account attached."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Failed to {action} for {email}: {e!r}")
        raise QueryFailure(f"Failed to {action}: {email}", email=email) from e
