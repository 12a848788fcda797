"""Harness services: probes, simulators and comparators."""

from userharness.services.comparator import compare_envelope, compare_responses, envelope_diff
from userharness.services.probe import StateProbe
from userharness.services.testdata import AccountFixtures, hash_password
from userharness.services.verification import VerificationSimulator

__all__ = [
    "AccountFixtures",
    "StateProbe",
    "VerificationSimulator",
    "compare_envelope",
    "compare_responses",
    "envelope_diff",
    "hash_password",
]
