"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without a real host runtime.
"""

import pytest
from unittest.mock import Mock

from retry_runner.host import CallableHost
from retry_runner.models.test_case import TestCase


@pytest.fixture
def mock_host():
    """Mock host whose attempts always pass unless ``run_once.side_effect`` is set."""
    mock = Mock(spec=CallableHost)
    mock.run_once = Mock(return_value=None)
    mock.clear_fixtures = Mock(return_value=None)
    mock.message = Mock(return_value=None)
    mock.notify_retry = Mock(return_value=None)
    return mock


@pytest.fixture
def failing_run_once():
    """Factory for ``run_once`` side effects failing the first ``n`` attempts."""
    def _create(failures: int, error_factory=lambda n: RuntimeError(f"failure {n}")):
        calls = {"n": 0}

        def run_once(test: TestCase) -> None:
            calls["n"] += 1
            test.exception = error_factory(calls["n"]) if calls["n"] <= failures else None

        run_once.calls = calls
        return run_once

    return _create
