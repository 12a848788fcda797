"""Account fixture tests."""

import logging

import bcrypt
import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from tests.conftest import TEST_PASSWORD, create_profile, lock_account, start_password_reset
from userharness.database import ConnectionProvider
from userharness.errors import AccountExistsError, AccountNotFoundError
from userharness.models import EventRegistration, Role, UserAccount, UserProfile, UserRole
from userharness.services import (
    AccountFixtures,
    StateProbe,
    VerificationSimulator,
    hash_password,
    queries,
)


@pytest.mark.asyncio
async def test_create_account_defaults(
    connections: ConnectionProvider, probe: StateProbe, manager: AccountFixtures
):
    """Test creating an account with default names and flags."""
    account_id = await manager.create_account("new@example.com", TEST_PASSWORD)

    assert account_id > 0
    details = await probe.account_details("new@example.com")
    assert details is not None
    assert details.first_name == "Test"
    assert details.last_name == "User"
    assert details.enabled is True
    assert details.locked is False
    assert details.failed_login_attempts == 0

    async with connections.open() as conn:
        result = await conn.execute(
            select(UserAccount.password).where(UserAccount.email == "new@example.com")
        )
        stored = result.scalar_one()
    assert stored != TEST_PASSWORD
    assert bcrypt.checkpw(TEST_PASSWORD.encode(), stored.encode())


@pytest.mark.asyncio
async def test_create_account_duplicate(manager: AccountFixtures, enabled_email: str):
    """Test that an existing email is refused."""
    with pytest.raises(AccountExistsError) as exc_info:
        await manager.create_account(enabled_email, TEST_PASSWORD)

    assert exc_info.value.email == enabled_email


@pytest.mark.asyncio
async def test_delete_account(
    connections: ConnectionProvider,
    probe: StateProbe,
    manager: AccountFixtures,
    registered_email: str,
):
    """Test deleting an account removes its tokens too."""
    await start_password_reset(connections, registered_email, "reset-token")

    await manager.delete_account(registered_email)

    assert await probe.account_exists(registered_email) is False
    assert await probe.has_verification_token(registered_email) is False
    assert await probe.has_password_reset_token(registered_email) is False
    await probe.assert_account_deleted(registered_email)


@pytest.mark.asyncio
async def test_delete_account_missing(manager: AccountFixtures):
    """Test deleting an unknown account."""
    with pytest.raises(AccountNotFoundError):
        await manager.delete_account("nobody@example.com")


@pytest.mark.asyncio
async def test_enable_account(probe: StateProbe, manager: AccountFixtures, registered_email: str):
    """Test the strict enable consumes the token."""
    await manager.enable_account(registered_email)

    await probe.assert_email_verified(registered_email)


@pytest.mark.asyncio
async def test_enable_account_missing(manager: AccountFixtures):
    """Test enabling an unknown account is an error, unlike simulation."""
    with pytest.raises(AccountNotFoundError):
        await manager.enable_account("nobody@example.com")


@pytest.mark.asyncio
async def test_unlock_account(
    connections: ConnectionProvider,
    probe: StateProbe,
    manager: AccountFixtures,
    enabled_email: str,
):
    """Test unlocking clears the flag and the failed login counter."""
    await lock_account(connections, enabled_email, attempts=5)
    await probe.assert_locked(enabled_email)

    await manager.unlock_account(enabled_email)

    await probe.assert_unlocked(enabled_email)
    details = await probe.account_details(enabled_email)
    assert details is not None
    assert details.failed_login_attempts == 0


@pytest.mark.asyncio
async def test_unlock_account_missing(manager: AccountFixtures):
    """Test unlocking an unknown account."""
    with pytest.raises(AccountNotFoundError):
        await manager.unlock_account("nobody@example.com")


@pytest.mark.asyncio
async def test_issue_verification_token_replaces_previous(
    simulator: VerificationSimulator, manager: AccountFixtures, registered_email: str
):
    """Test issuing a token leaves exactly the new one behind."""
    old = await simulator.get_token(registered_email)

    info = await manager.issue_verification_token(registered_email)

    assert info.token != old
    assert info.expiry_date is not None
    assert await simulator.get_token(registered_email) == info.token


@pytest.mark.asyncio
async def test_issue_verification_token_missing(manager: AccountFixtures):
    """Test issuing a token for an unknown account."""
    with pytest.raises(AccountNotFoundError):
        await manager.issue_verification_token("nobody@example.com")


def test_hash_password():
    """Test hashes are salted bcrypt."""
    first = hash_password("secret")
    second = hash_password("secret")

    assert first != second
    assert first.startswith("$2")
    assert bcrypt.checkpw(b"secret", first.encode())


@pytest.mark.asyncio
async def test_create_account_grants_default_role(probe: StateProbe, manager: AccountFixtures):
    """Test new accounts hold ROLE_USER like self-registered ones."""
    await manager.create_account("new@example.com", TEST_PASSWORD)

    assert await probe.account_roles("new@example.com") == ["ROLE_USER"]


@pytest.mark.asyncio
async def test_create_account_without_default_role(
    connections: ConnectionProvider,
    probe: StateProbe,
    manager: AccountFixtures,
    caplog: pytest.LogCaptureFixture,
):
    """Test a schema with no ROLE_USER still gets the account, with a warning."""
    async with connections.begin() as conn:
        await conn.execute(delete(Role))

    with caplog.at_level(logging.WARNING, logger="userharness"):
        await manager.create_account("new@example.com", TEST_PASSWORD)

    assert await probe.account_exists("new@example.com") is True
    assert await probe.account_roles("new@example.com") == []
    assert "ROLE_USER not found" in caplog.text


@pytest.mark.asyncio
async def test_foreign_keys_block_bare_account_delete(
    connections: ConnectionProvider, enabled_email: str
):
    """Test the schema refuses to drop an account that still has dependents."""
    with pytest.raises(IntegrityError):
        async with connections.begin() as conn:
            await conn.execute(queries.delete_account(enabled_email))


@pytest.mark.asyncio
async def test_delete_account_with_profile_and_roles(
    connections: ConnectionProvider,
    probe: StateProbe,
    manager: AccountFixtures,
    registered_email: str,
):
    """Test deletion clears registrations, profile and role grants first."""
    await create_profile(connections, registered_email, registrations=2)
    await start_password_reset(connections, registered_email, "reset-token")

    await manager.delete_account(registered_email)

    assert await probe.account_exists(registered_email) is False
    async with connections.open() as conn:
        for model in (EventRegistration, UserProfile, UserRole):
            result = await conn.execute(select(func.count()).select_from(model))
            assert result.scalar_one() == 0, model.__tablename__


@pytest.mark.asyncio
async def test_delete_account_keeps_other_profiles(
    connections: ConnectionProvider,
    probe: StateProbe,
    manager: AccountFixtures,
    registered_email: str,
    enabled_email: str,
):
    """Test deletion only touches the deleted account's rows."""
    await create_profile(connections, registered_email)
    await create_profile(connections, enabled_email, registrations=3)

    await manager.delete_account(registered_email)

    assert await probe.account_roles(enabled_email) == ["ROLE_USER"]
    async with connections.open() as conn:
        result = await conn.execute(select(func.count()).select_from(EventRegistration))
        assert result.scalar_one() == 3
