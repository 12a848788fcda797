"""Structural comparison of JSON response envelopes."""

import logging

import httpx
from pydantic import ValidationError

from userharness.errors import AssertionFailure, EmptyResponseError
from userharness.schemas import ResponseEnvelope

logger = logging.getLogger(__name__)

# Security rejections from the framework carry no body
AUTH_REJECTION_STATUSES = frozenset({401, 403})

ENVELOPE_FIELDS = ("success", "code", "redirect_url", "messages", "data")


def _same_value(want, got) -> bool:
    """Deep equality that never equates values of different JSON types."""
    if type(want) is not type(got):
        return False
    if isinstance(want, dict):
        return want.keys() == got.keys() and all(_same_value(want[k], got[k]) for k in want)
    if isinstance(want, list):
        return len(want) == len(got) and all(map(_same_value, want, got))
    return want == got


def envelope_diff(actual: ResponseEnvelope, expected: ResponseEnvelope) -> list[str]:
    """List of ``field: expected X, got Y`` lines for every mismatched field.

    Fields are compared in their JSON form, so ``True`` never matches ``1``
    and ``7`` never matches ``7.0``.
    """
    want_json = expected.model_dump(mode="json")
    got_json = actual.model_dump(mode="json")
    lines = []
    for name in ENVELOPE_FIELDS:
        if not _same_value(want_json[name], got_json[name]):
            alias = ResponseEnvelope.model_fields[name].alias or name
            want, got = getattr(expected, name), getattr(actual, name)
            lines.append(f"{alias}: expected {want!r}, got {got!r}")
    return lines


def compare_envelope(status_code: int, body: str | bytes | None, expected: ResponseEnvelope) -> None:
    """Assert an observed response body matches the expected envelope.

    An empty body is accepted only as a 401/403 rejection of a request that
    was expected to fail.

    Raises:
        EmptyResponseError: empty body under any other condition
        AssertionFailure: body does not parse or differs from ``expected``
    """
    if not body:
        if status_code in AUTH_REJECTION_STATUSES and not expected.success:
            logger.debug(f"Empty {status_code} accepted as expected failure")
            return
        raise EmptyResponseError(status_code)

    try:
        actual = ResponseEnvelope.model_validate_json(body)
    except ValidationError as e:
        raise AssertionFailure(
            f"Response body is not a valid envelope (status {status_code}): {e}"
        ) from e

    diff = envelope_diff(actual, expected)
    if diff:
        raise AssertionFailure("Response envelope mismatch:\n  " + "\n  ".join(diff))


def compare_responses(response: httpx.Response, expected: ResponseEnvelope) -> None:
    """Assert an HTTP response matches the expected envelope."""
    compare_envelope(response.status_code, response.content, expected)
