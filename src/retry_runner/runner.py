"""
Suite runner: runs a batch of tests through the retry executor.

One ``run`` call is one top-level test run: the retry budget is reset at
its start so charges never leak between runs. Tests are run serially or on
a thread pool; each test's attempt loop stays sequential either way.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable

import structlog

from retry_runner.config import Settings
from retry_runner.host import TestHost
from retry_runner.logging_config import configure_logging
from retry_runner.models.test_case import TestCase
from retry_runner.retry.engine import RetryExecutor
from retry_runner.retry.metadata import AttemptRecord

logger = structlog.get_logger(__name__)


@dataclass
class SuiteResult:
    """Outcome of one suite run, records in input order."""

    records: list[tuple[TestCase, AttemptRecord]] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def passed(self) -> list[TestCase]:
        return [test for test, record in self.records if record.succeeded]

    @property
    def failed(self) -> list[TestCase]:
        return [test for test, record in self.records if not record.succeeded]

    @property
    def flaky(self) -> list[TestCase]:
        """Tests that passed only after at least one retry."""
        return [test for test, record in self.records if record.succeeded and record.retries > 0]

    @property
    def attempts(self) -> list[int]:
        return [record.attempts for _, record in self.records]


class SuiteRunner:
    """
    Runs tests through a RetryExecutor with a budget reset per run.

    Attributes:
        executor: Executor shared by every test of the run
        max_workers: Thread pool size (1 = serial, in order)
    """

    def __init__(self, executor: RetryExecutor, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.executor = executor
        self.max_workers = max_workers

    @classmethod
    def from_settings(cls, settings: Settings, host: TestHost, max_workers: int = 1) -> "SuiteRunner":
        """
        Build a runner for a test process: configure logging from
        ``settings`` and use the process-wide retry budget.
        """
        configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
        return cls(RetryExecutor(settings, host), max_workers=max_workers)

    def run(self, tests: Iterable[TestCase]) -> SuiteResult:
        tests = list(tests)
        start_time_ms = int(time.time() * 1000)
        self.executor.budget.reset()

        logger.info(
            "Starting suite run",
            tests_count=len(tests),
            max_workers=self.max_workers,
            max_retries=self.executor.budget.max_retries,
        )

        if self.max_workers == 1:
            records = [self.executor.run_with_retry(test) for test in tests]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                records = list(pool.map(self.executor.run_with_retry, tests))

        result = SuiteResult(
            records=list(zip(tests, records)),
            duration_ms=int(time.time() * 1000) - start_time_ms,
        )

        logger.info(
            "Suite run finished",
            passed=len(result.passed),
            failed=len(result.failed),
            flaky=len(result.flaky),
            duration_ms=result.duration_ms,
        )
        return result
