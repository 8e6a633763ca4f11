"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import io

import pytest

from retry_runner.config import Settings
from retry_runner.host import CallableHost
from retry_runner.models.test_case import RetryOptions, TestCase
from retry_runner.retry.budget import GlobalRetryBudget, default_budget, reset_global_budget
from retry_runner.retry.engine import RetryExecutor


@pytest.fixture(autouse=True)
def clean_retry_environment(monkeypatch):
    """Remove the env override and reset the process-wide budget around each test."""
    monkeypatch.delenv("RETRY_RUNNER_RETRY_COUNT", raising=False)
    reset_global_budget()
    yield
    reset_global_budget()
    default_budget.configure(None)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with explicit defaults.
    
    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.MAX_RETRIES = 2
    """
    return Settings(
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        VERBOSE_RETRY=False,
        DISPLAY_TRY_FAILURE_MESSAGES=False,
        DEFAULT_RETRY_COUNT=1,
        DEFAULT_SLEEP_INTERVAL=0.0,
        CLEAR_FIXTURES_ON_FAILURE=True,
        MAX_RETRIES=None,
    )


@pytest.fixture
def output() -> io.StringIO:
    """Reporter output stream."""
    return io.StringIO()


@pytest.fixture
def host(output: io.StringIO) -> CallableHost:
    """In-process host writing reporter messages to ``output``."""
    return CallableHost(output=output)


@pytest.fixture
def budget() -> GlobalRetryBudget:
    """Independent, disabled budget (set ``budget.configure(n)`` to enable)."""
    return GlobalRetryBudget()


@pytest.fixture
def sleeps() -> list[float]:
    """Backoff waits recorded by the executor fixture."""
    return []


@pytest.fixture
def executor(test_settings, host, budget, sleeps) -> RetryExecutor:
    """Executor with an injected budget and a recording (non-blocking) sleep."""
    return RetryExecutor(test_settings, host, budget=budget, sleep=sleeps.append)


@pytest.fixture
def make_test():
    """Factory fixture to create TestCase instances.
    
    Usage:
        def test_something(make_test):
            test = make_test(body=lambda scope: None, retry=3)
    """
    counter = {"n": 0}

    def _create(body=None, description=None, teardown=None, metadata=None, **options) -> TestCase:
        counter["n"] += 1
        return TestCase(
            description=description or f"example {counter['n']}",
            location=f"./tests/test_examples.py:{counter['n'] * 10}",
            body=body,
            options=RetryOptions(**options),
            metadata=dict(metadata or {}),
            teardown=list(teardown or []),
        )

    return _create


@pytest.fixture
def scripted_body():
    """Factory for bodies that fail or pass according to a script.
    
    ``scripted_body([False, False, True])`` fails twice then passes. Once the
    script runs out the last outcome repeats. The returned body exposes
    ``calls`` with the number of times it ran.
    """
    def _create(outcomes, error_factory=lambda n: AssertionError(f"failure {n}")):
        outcomes = list(outcomes)

        def body(scope):
            body.calls += 1
            index = min(body.calls, len(outcomes)) - 1
            if not outcomes[index]:
                raise error_factory(body.calls)

        body.calls = 0
        return body

    return _create
