"""
Retry policy resolution.

Merges the overlapping configuration sources into one effective retry
count for a test. Nominal count precedence (first non-empty wins):

    1. RETRY_RUNNER_RETRY_COUNT environment override
    2. Per-test ``options.retry``
    3. Settings.RETRY_COUNT_CONDITION(test)
    4. Settings.DEFAULT_RETRY_COUNT

The result is floored at 1, then two gates may collapse it to a single
attempt: the skip predicate and the global retry budget.
"""

from typing import Any, Optional

import structlog

from retry_runner.config import Settings, read_retry_count_override
from retry_runner.models.enums import CountSource
from retry_runner.models.policy import RetryPolicy
from retry_runner.models.test_case import TestCase
from retry_runner.retry.budget import RetryBudget
from retry_runner.retry.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


def coerce_count(value: Any, source: CountSource) -> int:
    """
    Read a retry count as an integer floored at 1.

    Raises:
        ConfigurationError: If the value is not an integer
    """
    if isinstance(value, bool):
        raise ConfigurationError(
            "Retry count must be an integer",
            {"source": source.value, "value": repr(value)},
        )
    try:
        count = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            "Retry count must be an integer",
            {"source": source.value, "value": repr(value), "error": str(e)},
        ) from e
    return max(count, 1)


class RetryPolicyResolver:
    """
    Resolves the effective RetryPolicy of a test.

    Resolution is repeated on every call: the override is read from the
    environment each time and the budget gate reflects the current charges.
    """

    def __init__(self, settings: Settings, budget: RetryBudget):
        self.settings = settings
        self.budget = budget

    def nominal_count(self, test: TestCase) -> tuple[int, CountSource]:
        override = read_retry_count_override()
        if override is not None:
            return coerce_count(override, CountSource.OVERRIDE), CountSource.OVERRIDE

        if test.options.retry is not None:
            return coerce_count(test.options.retry, CountSource.TEST), CountSource.TEST

        condition = self.settings.RETRY_COUNT_CONDITION
        if condition is not None:
            # Errors raised by the condition are configuration errors of the
            # caller and propagate as-is
            computed: Optional[Any] = condition(test)
            # A predicate-style condition answers False for "no opinion"
            if computed is not None and computed is not False:
                return coerce_count(computed, CountSource.CONDITION), CountSource.CONDITION

        return coerce_count(self.settings.DEFAULT_RETRY_COUNT, CountSource.DEFAULT), CountSource.DEFAULT

    def resolve(self, test: TestCase) -> RetryPolicy:
        """
        Compute the effective retry policy for ``test``.

        Does not charge the budget; charging happens on an actual failure.
        """
        nominal, source = self.nominal_count(test)
        if nominal == 1:
            return RetryPolicy(retry_count=1, nominal_count=1, source=source)

        skip_retry_if = self.settings.SKIP_RETRY_IF
        if skip_retry_if is not None and skip_retry_if(test):
            logger.debug(
                "Retries skipped by predicate",
                test=test.description,
                nominal_count=nominal,
            )
            return RetryPolicy(retry_count=1, skip=True, nominal_count=nominal, source=source)

        if not self.budget.admits(test.identity):
            return RetryPolicy(
                retry_count=1,
                budget_denied=True,
                nominal_count=nominal,
                source=source,
            )

        return RetryPolicy(retry_count=nominal, nominal_count=nominal, source=source)
