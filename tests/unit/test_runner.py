"""
Unit tests for SuiteRunner.
"""

import pytest

from retry_runner.retry.budget import SettingsBudget, default_budget
from retry_runner.runner import SuiteRunner


def test_records_in_input_order(executor, make_test, scripted_body):
    tests = [
        make_test(body=scripted_body([True]), retry=3),
        make_test(body=scripted_body([False, True]), retry=3),
        make_test(body=scripted_body([False]), retry=2),
    ]

    result = SuiteRunner(executor).run(tests)

    assert result.attempts == [1, 2, 2]
    assert result.passed == tests[:2]
    assert result.failed == [tests[2]]
    assert result.flaky == [tests[1]]
    assert result.duration_ms >= 0


def test_budget_reset_at_start_of_each_run(budget, executor, make_test, scripted_body):
    budget.configure(1)
    runner = SuiteRunner(executor)

    first = runner.run([make_test(body=scripted_body([False]), retry=3) for _ in range(3)])
    second = runner.run([make_test(body=scripted_body([False]), retry=3) for _ in range(3)])

    assert first.attempts == [3, 1, 1]
    assert second.attempts == [3, 1, 1]


def test_concurrent_run_respects_budget(budget, executor, make_test, scripted_body):
    budget.configure(3)
    tests = [make_test(body=scripted_body([False]), retry=4) for _ in range(12)]

    result = SuiteRunner(executor, max_workers=6).run(tests)

    assert sorted(result.attempts) == [1] * 9 + [4] * 3
    assert budget.charged_count == 3


def test_invalid_worker_count():
    with pytest.raises(ValueError):
        SuiteRunner(executor=None, max_workers=0)


def test_from_settings_configures_logging_and_shared_budget(monkeypatch, test_settings, host):
    calls = []
    monkeypatch.setattr("retry_runner.runner.configure_logging", lambda *args: calls.append(args))
    test_settings.MAX_RETRIES = 2

    runner = SuiteRunner.from_settings(test_settings, host, max_workers=2)

    assert calls == [("DEBUG", "development")]
    assert isinstance(runner.executor.budget, SettingsBudget)
    assert runner.executor.budget.budget is default_budget
    assert runner.executor.budget.max_retries == 2
    assert runner.max_workers == 2
