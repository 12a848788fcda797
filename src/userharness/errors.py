"""Harness exceptions."""


class HarnessError(Exception):
    """Base class for all harness errors."""

    pass


class QueryFailure(HarnessError):
    """A statement against the user-management database failed."""

    def __init__(self, message: str, email: str | None = None) -> None:
        super().__init__(message)
        self.email = email


class MissingTokenError(HarnessError):
    """No active verification token exists for the account."""

    def __init__(self, email: str) -> None:
        super().__init__(f"No verification token found for user: {email}")
        self.email = email


class AccountNotFoundError(HarnessError):
    """The account a mutation targets does not exist."""

    def __init__(self, email: str) -> None:
        super().__init__(f"User not found: {email}")
        self.email = email


class AccountExistsError(HarnessError):
    """An account with this email already exists."""

    def __init__(self, email: str) -> None:
        super().__init__(f"User already exists: {email}")
        self.email = email


class AssertionFailure(HarnessError, AssertionError):
    """A composite state or response check did not hold.

    Subclasses AssertionError so test runners report it as a failed
    assertion rather than an error.
    """

    pass


class EmptyResponseError(AssertionFailure):
    """The response body was empty and not an acceptable auth rejection."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Empty response body. Status: {status_code}")
        self.status_code = status_code
