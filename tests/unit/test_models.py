"""
Unit tests for data models and the attempt record.
"""

import pytest
from pydantic import ValidationError

from retry_runner.models.enums import CountSource, TerminationReason
from retry_runner.models.policy import RetryPolicy
from retry_runner.models.test_case import RetryOptions, TestCase
from retry_runner.retry.metadata import AttemptRecord


def test_identity_defaults_to_object_identity():
    first = TestCase(description="same")
    second = TestCase(description="same")

    assert first.identity != second.identity
    assert first.identity == id(first)


def test_explicit_key_is_identity():
    assert TestCase(description="a", key="tests/a.py::a").identity == "tests/a.py::a"


def test_new_test_case_state():
    test = TestCase(description="fresh")

    assert test.attempts == 0
    assert test.exception is None
    assert test.passed
    assert test.retry_exceptions == []
    assert test.retry_attempts == 0


def test_merge_overrides_splits_options_and_metadata():
    test = TestCase(description="a", options=RetryOptions(retry=2))

    test.merge_overrides({"retry": "3", "retry_wait": 0.5, "ticket": "QA-1"})

    assert test.options.retry == 3
    assert test.options.retry_wait == 0.5
    assert test.metadata == {"ticket": "QA-1"}


def test_merge_overrides_validates_options():
    test = TestCase(description="a")

    with pytest.raises(ValidationError):
        test.merge_overrides({"retry": "often"})


def test_retry_options_reject_unknown_fields():
    with pytest.raises(ValidationError):
        RetryOptions(retries=3)


def test_policy_requires_positive_count():
    with pytest.raises(ValidationError):
        RetryPolicy(retry_count=0, nominal_count=1, source=CountSource.DEFAULT)


def test_policy_is_frozen():
    policy = RetryPolicy(retry_count=2, nominal_count=2, source=CountSource.TEST)

    with pytest.raises(ValidationError):
        policy.retry_count = 3


def test_attempt_record_properties():
    errors = [RuntimeError("1"), RuntimeError("2")]
    record = AttemptRecord(
        attempts=2,
        reason=TerminationReason.RETRY_COUNT_REACHED,
        retry_count=2,
        exceptions=errors,
    )

    assert not record.succeeded
    assert record.retries == 1
    assert record.last_exception is errors[1]


def test_successful_record_has_no_last_exception():
    record = AttemptRecord(
        attempts=2,
        reason=TerminationReason.SUCCEEDED,
        exceptions=[RuntimeError("1")],
    )

    assert record.succeeded
    assert record.last_exception is None


def test_attempt_record_invariants():
    with pytest.raises(ValueError):
        AttemptRecord(attempts=0, reason=TerminationReason.SUCCEEDED)
    with pytest.raises(ValueError):
        AttemptRecord(attempts=2, reason=TerminationReason.HARD_FAIL, exceptions=[RuntimeError()])
    with pytest.raises(ValueError):
        AttemptRecord(attempts=1, reason=TerminationReason.SUCCEEDED, total_wait_seconds=-1)
