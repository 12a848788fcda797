"""Test-only endpoints for querying and manipulating account state.

Browser-driven tests use these to check preconditions and shortcut email
flows without database credentials. The router is only mounted when the
test API is enabled and must never be reachable in production.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status

from userharness.api.deps import ManagerDep, ProbeDep, SettingsDep, SimulatorDep
from userharness.schemas import CreateAccountRequest, TokenInfo

logger = logging.getLogger(__name__)

router = APIRouter()

EmailParam = Annotated[str, Query(description="Account email")]


def _token_response(email: str, exists: bool, info: TokenInfo | None) -> dict:
    return {
        "exists": exists,
        "email": email,
        "token": info.token if info else None,
        "expiryDate": info.expiry_date.isoformat() if info and info.expiry_date else None,
    }


@router.get("/health")
async def health(config: SettingsDep):
    """Confirms the test API is mounted."""
    return {"status": "ok", "environment": config.environment}


@router.get("/user/exists")
async def user_exists(probe: ProbeDep, email: EmailParam):
    """Check if a user exists by email."""
    logger.debug(f"Test API: checking if user exists: {email}")
    return {"exists": await probe.account_exists(email), "email": email}


@router.get("/user/enabled")
async def user_enabled(probe: ProbeDep, email: EmailParam):
    """Check if a user is enabled (email verified)."""
    logger.debug(f"Test API: checking if user is enabled: {email}")
    exists = await probe.account_exists(email)
    enabled = await probe.is_enabled(email) if exists else False
    return {"exists": exists, "enabled": enabled, "email": email}


@router.get("/user/details")
async def user_details(probe: ProbeDep, email: EmailParam):
    """Get user details for validation."""
    logger.debug(f"Test API: getting user details: {email}")
    details = await probe.account_details(email)
    if details is None:
        return {"exists": False, "email": email}
    return {
        "exists": True,
        "email": email,
        "firstName": details.first_name,
        "lastName": details.last_name,
        "enabled": details.enabled,
        "locked": details.locked,
        "failedLoginAttempts": details.failed_login_attempts,
    }


@router.get("/user/verification-token")
async def get_verification_token(
    probe: ProbeDep, simulator: SimulatorDep, email: EmailParam
):
    """Get the verification token so tests can open the confirmation URL directly."""
    logger.debug(f"Test API: getting verification token for: {email}")
    if not await probe.account_exists(email):
        return _token_response(email, False, None)
    return _token_response(email, True, await simulator.get_token_info(email))


@router.get("/user/password-reset-token")
async def get_password_reset_token(probe: ProbeDep, email: EmailParam):
    """Get the password reset token for a user."""
    logger.debug(f"Test API: getting password reset token for: {email}")
    if not await probe.account_exists(email):
        return _token_response(email, False, None)
    return _token_response(email, True, await probe.get_password_reset_token(email))


@router.post("/user", status_code=status.HTTP_201_CREATED)
async def create_test_user(request: CreateAccountRequest, manager: ManagerDep):
    """Create a user directly in the database."""
    account_id = await manager.create_account(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        enabled=request.enabled,
    )
    enabled = request.enabled if request.enabled is not None else True
    return {"success": True, "id": account_id, "email": request.email, "enabled": enabled}


@router.delete("/user")
async def delete_test_user(manager: ManagerDep, email: EmailParam):
    """Delete a user and its tokens."""
    await manager.delete_account(email)
    return {"success": True, "email": email}


@router.post("/user/enable")
async def enable_user(manager: ManagerDep, email: EmailParam):
    """Enable a user directly, consuming its verification token."""
    await manager.enable_account(email)
    return {"success": True, "email": email, "enabled": True}


@router.post("/user/verification-token", status_code=status.HTTP_201_CREATED)
async def create_verification_token(manager: ManagerDep, email: EmailParam):
    """Issue a fresh verification token, for flows where emails are disabled."""
    info = await manager.issue_verification_token(email)
    return {
        "success": True,
        "email": email,
        "token": info.token,
        "expiryDate": info.expiry_date.isoformat() if info.expiry_date else None,
    }


@router.post("/user/unlock")
async def unlock_user(manager: ManagerDep, email: EmailParam):
    """Unlock a user account and reset its failed login counter."""
    await manager.unlock_account(email)
    return {"success": True, "email": email, "locked": False}
