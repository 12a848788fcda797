"""Pydantic schemas for harness data and the wire envelope."""

from userharness.schemas.account import AccountDetails, CreateAccountRequest, TokenInfo
from userharness.schemas.envelope import ResponseEnvelope

__all__ = [
    "AccountDetails",
    "CreateAccountRequest",
    "ResponseEnvelope",
    "TokenInfo",
]
