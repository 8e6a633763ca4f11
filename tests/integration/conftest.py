"""Integration test fixtures.

Wires a real RetryExecutor to the in-process host with real (blocking)
backoff waits and the process-wide retry budget.
"""

import pytest

from retry_runner.host import CallableHost
from retry_runner.retry.engine import RetryExecutor
from retry_runner.runner import SuiteRunner


@pytest.fixture
def live_executor(test_settings, host) -> RetryExecutor:
    """Executor using time.sleep and the process-wide budget."""
    return RetryExecutor(test_settings, host)


@pytest.fixture
def suite_runner(live_executor) -> SuiteRunner:
    return SuiteRunner(live_executor)


@pytest.fixture
def host_with_fixtures(output):
    """Factory for hosts with fixture factories."""
    def _create(**fixtures) -> CallableHost:
        return CallableHost(fixtures=fixtures, output=output)

    return _create
