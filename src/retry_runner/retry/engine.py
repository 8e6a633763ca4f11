"""
Retry executor: the attempt loop for one test.

The host calls ``run_with_retry`` once per test from its wrapping hook.
Each iteration delegates exactly one attempt to the host, then decides
whether to stop:

    1. Attempt passed                       -> SUCCEEDED
    2. Budget refuses to charge this test   -> BUDGET_EXHAUSTED
    3. Retry count reached                  -> RETRY_COUNT_REACHED / SKIPPED
    4. Failure matches the hard-fail list   -> HARD_FAIL
    5. Retry list set and does not match    -> NON_RETRYABLE

Otherwise the host clears fixtures, the retry callback runs, the backoff
wait is applied and the next attempt starts.

Usage:
    executor = RetryExecutor(settings, host)
    record = executor.run_with_retry(test, {"retry": 3})
"""

import time
from typing import Any, Callable, Optional

import structlog

from retry_runner.config import Settings
from retry_runner.host import TestHost
from retry_runner.models.enums import TerminationReason
from retry_runner.models.policy import RetryPolicy
from retry_runner.models.test_case import RETRY_ATTEMPTS_KEY, RETRY_EXCEPTIONS_KEY, TestCase
from retry_runner.monitoring.metrics import (
    retries_total,
    retry_attempts_total,
    retry_backoff_seconds,
    retry_terminations_total,
)
from retry_runner.retry import classifier
from retry_runner.retry.backoff import BackoffScheduler
from retry_runner.retry.budget import RetryBudget, SettingsBudget, default_budget
from retry_runner.retry.metadata import AttemptRecord
from retry_runner.retry.policy import RetryPolicyResolver

logger = structlog.get_logger(__name__)

MESSAGE_PREFIX = "RetryRunner"


def ordinalize(number: int) -> str:
    """1 -> "1st", 2 -> "2nd", 11 -> "11th", 23 -> "23rd"."""
    if 11 <= number % 100 <= 13:
        return f"{number}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def exception_strings(exc: BaseException) -> list[str]:
    """Message lines for a failure; exception groups expand to their members."""
    if isinstance(exc, BaseExceptionGroup):
        return [str(member) for member in exc.exceptions]
    return [str(exc)]


class RetryExecutor:
    """
    Runs the attempt loop of a test against a host runtime.

    One executor can serve many tests, including concurrently from several
    threads: per-test state lives on the TestCase and the only shared state
    is the (lock-guarded) budget.

    Attributes:
        settings: Process-wide retry settings
        host: Host runtime executing single attempts
        budget: Retry budget (process-wide default unless injected)
        resolver: Policy resolver bound to the same settings and budget
        backoff: Backoff scheduler
    """

    def __init__(
        self,
        settings: Settings,
        host: TestHost,
        budget: Optional[RetryBudget] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        """
        Initialize retry executor.

        Args:
            settings: Retry settings
            host: Host runtime
            budget: Injected budget; when omitted the process-wide budget is
                used with the limit read from ``settings.MAX_RETRIES`` on
                every decision
            sleep: Blocking wait used for backoff
        """
        self.settings = settings
        self.host = host
        if budget is None:
            budget = SettingsBudget(default_budget, lambda: settings.MAX_RETRIES)
        self.budget = budget
        self.resolver = RetryPolicyResolver(settings, budget)
        self.backoff = BackoffScheduler(settings)
        self._sleep = sleep

    def clear_fixtures_enabled(self, test: TestCase) -> bool:
        if test.options.clear_fixtures_on_failure is not None:
            return test.options.clear_fixtures_on_failure
        return self.settings.CLEAR_FIXTURES_ON_FAILURE

    def run_with_retry(
        self, test: TestCase, overrides: Optional[dict[str, Any]] = None
    ) -> AttemptRecord:
        """
        Run ``test`` until it passes or a stop condition is met.

        The final failure (if any) is left on ``test.exception`` for the host
        to report; nothing the test raised is re-raised here.

        Args:
            test: Test to run
            overrides: One-shot option/metadata overrides merged before the
                first attempt

        Returns:
            AttemptRecord describing the loop

        Raises:
            ConfigurationError: Invalid retry configuration
            Exception: Anything raised by SKIP_RETRY_IF or RETRY_COUNT_CONDITION
        """
        if overrides:
            test.merge_overrides(overrides)

        test.attempts = 0
        exceptions: list[BaseException] = []
        test.metadata[RETRY_EXCEPTIONS_KEY] = exceptions
        total_wait = 0.0
        policy: Optional[RetryPolicy] = None

        while True:
            if test.attempts > 0:
                self.host.notify_retry(test)
                retries_total.inc()
                if self.settings.VERBOSE_RETRY:
                    message = f"{MESSAGE_PREFIX}: {ordinalize(test.attempts + 1)} try {test.location}"
                    if test.attempts == 1:
                        message = "\n" + message
                    self.host.message(message)

            test.metadata[RETRY_ATTEMPTS_KEY] = test.attempts

            test.exception = None
            self.host.run_once(test)
            test.attempts += 1

            failure = test.exception
            if failure is None:
                retry_attempts_total.labels(outcome="passed").inc()
                return self._finish(test, TerminationReason.SUCCEEDED, policy, total_wait)

            retry_attempts_total.labels(outcome="failed").inc()
            exceptions.append(failure)
            logger.info(
                "Attempt failed",
                test=test.description,
                location=test.location,
                attempt=test.attempts,
                error_type=type(failure).__name__,
            )

            if not self.budget.try_consume(test.identity):
                return self._finish(test, TerminationReason.BUDGET_EXHAUSTED, policy, total_wait)

            # Recomputed every attempt: the override and the budget may change
            policy = self.resolver.resolve(test)
            if test.attempts >= policy.retry_count:
                reason = TerminationReason.SKIPPED if policy.skip else TerminationReason.RETRY_COUNT_REACHED
                return self._finish(test, reason, policy, total_wait)

            hard_fail = self.settings.EXCEPTIONS_TO_HARD_FAIL
            if hard_fail and classifier.matches(hard_fail, failure):
                return self._finish(test, TerminationReason.HARD_FAIL, policy, total_wait)

            retry_on = self.settings.EXCEPTIONS_TO_RETRY
            if retry_on and not classifier.matches(retry_on, failure):
                return self._finish(test, TerminationReason.NON_RETRYABLE, policy, total_wait)

            if self.settings.VERBOSE_RETRY and self.settings.DISPLAY_TRY_FAILURE_MESSAGES:
                lines = "\n".join(exception_strings(failure))
                self.host.message(
                    f"\n{ordinalize(test.attempts)} Try error in {test.location}:\n{lines}\n"
                )

            if self.clear_fixtures_enabled(test):
                self.host.clear_fixtures(test)

            callback = self.settings.RETRY_CALLBACK
            if callback is not None:
                callback(test)

            wait_seconds = self.backoff.wait(test.attempts, test)
            if wait_seconds > 0:
                retry_backoff_seconds.observe(wait_seconds)
                logger.debug(
                    "Applying backoff",
                    test=test.description,
                    attempt=test.attempts,
                    backoff_seconds=wait_seconds,
                )
                self._sleep(wait_seconds)
                total_wait += wait_seconds

    def _finish(
        self,
        test: TestCase,
        reason: TerminationReason,
        policy: Optional[RetryPolicy],
        total_wait: float,
    ) -> AttemptRecord:
        retry_terminations_total.labels(reason=reason.value).inc()
        retry_count = policy.retry_count if policy is not None else None

        log = logger.info if reason is TerminationReason.SUCCEEDED else logger.warning
        log(
            "Attempt loop finished",
            test=test.description,
            location=test.location,
            reason=reason.value,
            attempts=test.attempts,
            retry_count=retry_count,
        )

        return AttemptRecord(
            attempts=test.attempts,
            reason=reason,
            retry_count=retry_count,
            exceptions=list(test.retry_exceptions),
            total_wait_seconds=total_wait,
        )
