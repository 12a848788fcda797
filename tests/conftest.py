"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator
from datetime import timedelta
from pathlib import Path

# Set test environment before importing the harness
os.environ["ENVIRONMENT"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, insert, update
from sqlmodel import SQLModel

from userharness.config import Settings
from userharness.database import ConnectionProvider, get_provider
from userharness.main import create_app
from userharness.models import (
    DEFAULT_ROLE,
    EventRegistration,
    PasswordResetToken,
    Role,
    UserAccount,
    UserProfile,
    utc_now,
)
from userharness.services import AccountFixtures, StateProbe, VerificationSimulator, queries

TEST_PASSWORD = "Password123!"


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


def _enforce_foreign_keys(dbapi_connection, _connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def test_settings() -> Settings:
    """Settings pinned to the defaults the tests assert against."""
    return Settings(
        environment="test",
        app_base_url="http://localhost:8080",
        verification_path="/user/registrationConfirm",
        invalid_verification_token="invalid-token-12345",
    )


@pytest.fixture
async def connections(tmp_path: Path) -> AsyncGenerator[ConnectionProvider, None]:
    """Connection provider over a fresh database with the user-management schema.

    Foreign keys are enforced and the default role is seeded, as the system
    under test does on startup.
    """
    provider = ConnectionProvider.from_url(sqlite_url(tmp_path / "harness.db"))
    event.listen(provider.engine.sync_engine, "connect", _enforce_foreign_keys)

    async with provider.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
        await conn.execute(insert(Role).values(name=DEFAULT_ROLE))

    yield provider

    await provider.dispose()


@pytest.fixture
async def empty_connections(tmp_path: Path) -> AsyncGenerator[ConnectionProvider, None]:
    """Connection provider over a database with no tables at all."""
    provider = ConnectionProvider.from_url(sqlite_url(tmp_path / "empty.db"))
    yield provider
    await provider.dispose()


@pytest.fixture
def probe(connections: ConnectionProvider) -> StateProbe:
    return StateProbe(connections)


@pytest.fixture
def simulator(connections: ConnectionProvider, test_settings: Settings) -> VerificationSimulator:
    return VerificationSimulator(connections, test_settings)


@pytest.fixture
def manager(connections: ConnectionProvider, test_settings: Settings) -> AccountFixtures:
    return AccountFixtures(connections, test_settings)


@pytest.fixture
async def registered_email(manager: AccountFixtures) -> str:
    """An account as left by the registration flow: disabled, with a verification token."""
    email = "registered@example.com"
    await manager.create_account(
        email, TEST_PASSWORD, first_name="Reg", last_name="Istered", enabled=False
    )
    await manager.issue_verification_token(email)
    return email


@pytest.fixture
async def enabled_email(manager: AccountFixtures) -> str:
    """A verified account with no pending tokens."""
    email = "enabled@example.com"
    await manager.create_account(email, TEST_PASSWORD, first_name="En", last_name="Abled")
    return email


async def start_password_reset(connections: ConnectionProvider, email: str, token: str) -> None:
    """Persist a password reset token the way the library does when a reset starts."""
    async with connections.begin() as conn:
        await conn.execute(
            queries.insert_token(
                PasswordResetToken, email, token, utc_now() + timedelta(hours=1)
            )
        )


async def create_profile(connections: ConnectionProvider, email: str, registrations: int = 1) -> None:
    """Give an account a demo profile with some event registrations."""
    async with connections.begin() as conn:
        await conn.execute(
            insert(UserProfile).values(user_id=queries.account_id(email), favorite_color="blue")
        )
        for event_id in range(registrations):
            await conn.execute(
                insert(EventRegistration).values(
                    user_profile_user_id=queries.account_id(email), event_id=event_id
                )
            )


async def lock_account(connections: ConnectionProvider, email: str, attempts: int = 5) -> None:
    """Lock an account the way the library's lockout policy does."""
    async with connections.begin() as conn:
        await conn.execute(
            update(UserAccount)
            .where(UserAccount.email == email)
            .values(locked=True, failed_login_attempts=attempts, locked_date=utc_now())
        )


@pytest.fixture
async def client(
    connections: ConnectionProvider, test_settings: Settings
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the harness API with the test data endpoints mounted."""
    app = create_app(test_settings)
    app.dependency_overrides[get_provider] = lambda: connections

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
