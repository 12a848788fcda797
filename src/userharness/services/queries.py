"""Statements against the user-management schema.

This module and ``userharness.models`` are the only places that know table
and column names. Token tables are joined to accounts through a correlated
subquery on email, so no statement needs the account id up front.
"""

from datetime import datetime

from sqlalchemy import Delete, Insert, Select, Update, delete, func, insert, select, update

from userharness.models import (
    EventRegistration,
    PasswordResetToken,
    Role,
    UserAccount,
    UserProfile,
    UserRole,
    VerificationToken,
)

TokenModel = type[VerificationToken] | type[PasswordResetToken]


def account_id(email: str):
    """Scalar subquery resolving an email to its account id."""
    return select(UserAccount.id).where(UserAccount.email == email).scalar_subquery()


def count_accounts(email: str) -> Select:
    return select(func.count()).select_from(UserAccount).where(UserAccount.email == email)


def account_enabled(email: str) -> Select:
    return select(UserAccount.enabled).where(UserAccount.email == email)


def account_locked(email: str) -> Select:
    return select(UserAccount.locked).where(UserAccount.email == email)


def account_details(email: str) -> Select:
    return select(
        UserAccount.first_name,
        UserAccount.last_name,
        UserAccount.enabled,
        UserAccount.locked,
        UserAccount.failed_login_attempts,
    ).where(UserAccount.email == email)


def count_tokens(model: TokenModel, email: str) -> Select:
    return select(func.count()).select_from(model).where(model.user_id == account_id(email))


def select_token(model: TokenModel, email: str) -> Select:
    # Newest first in case the library ever leaves more than one behind
    return (
        select(model.token, model.expiry_date)
        .where(model.user_id == account_id(email))
        .order_by(model.id.desc())  # type: ignore[union-attr]
        .limit(1)
    )


def delete_tokens(model: TokenModel, email: str) -> Delete:
    return delete(model).where(model.user_id == account_id(email))


def insert_token(model: TokenModel, email: str, token: str, expiry_date: datetime) -> Insert:
    return insert(model).values(user_id=account_id(email), token=token, expiry_date=expiry_date)


def enable_account(email: str) -> Update:
    return update(UserAccount).where(UserAccount.email == email).values(enabled=True)


def unlock_account(email: str) -> Update:
    return (
        update(UserAccount)
        .where(UserAccount.email == email)
        .values(locked=False, failed_login_attempts=0, locked_date=None)
    )


def insert_account(
    email: str,
    password_hash: str,
    first_name: str,
    last_name: str,
    enabled: bool,
    registration_date: datetime,
) -> Insert:
    return (
        insert(UserAccount)
        .values(
            email=email,
            password=password_hash,
            first_name=first_name,
            last_name=last_name,
            enabled=enabled,
            locked=False,
            failed_login_attempts=0,
            registration_date=registration_date,
        )
        .returning(UserAccount.id)
    )


def delete_account(email: str) -> Delete:
    return delete(UserAccount).where(UserAccount.email == email)


def role_id(name: str) -> Select:
    return select(Role.id).where(Role.name == name)


def account_roles(email: str) -> Select:
    return (
        select(Role.name)
        .join(UserRole, UserRole.role_id == Role.id)
        .where(UserRole.user_id == account_id(email))
        .order_by(Role.name)
    )


def grant_role(email: str, role: int) -> Insert:
    return insert(UserRole).values(user_id=account_id(email), role_id=role)


def revoke_roles(email: str) -> Delete:
    return delete(UserRole).where(UserRole.user_id == account_id(email))


def delete_event_registrations(email: str) -> Delete:
    return delete(EventRegistration).where(
        EventRegistration.user_profile_user_id == account_id(email)
    )


def delete_profile(email: str) -> Delete:
    return delete(UserProfile).where(UserProfile.user_id == account_id(email))
