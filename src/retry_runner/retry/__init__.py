"""
Retry execution engine.

Re-runs failing tests according to the effective retry policy:

1. **Policy**: env override > per-test option > condition > default,
   floored at 1, collapsed to 1 by the skip predicate or the global budget
2. **Classification**: hard-fail list wins, retry list is consultative
3. **Budget**: at most MAX_RETRIES distinct tests may retry per run
4. **Backoff**: fixed or exponential wait between attempts

Main Components:
    - RetryExecutor: Attempt loop for one test
    - RetryPolicyResolver: Effective retry count for a test
    - GlobalRetryBudget: Lock-guarded set of tests that consumed a retry credit
    - BackoffScheduler: Wait before the next attempt
    - AttemptRecord: History of a finished attempt loop

Usage:
    >>> from retry_runner.retry import RetryExecutor
    >>> executor = RetryExecutor(settings, host)
    >>> record = executor.run_with_retry(test)
"""

from retry_runner.retry.backoff import BackoffScheduler
from retry_runner.retry.budget import (
    GlobalRetryBudget,
    RetryBudget,
    SettingsBudget,
    default_budget,
    reset_global_budget,
)
from retry_runner.retry.classifier import (
    ExceptionMatcher,
    MessageMatcher,
    PredicateMatcher,
    TypeMatcher,
    as_matcher,
    matches,
)
from retry_runner.retry.engine import RetryExecutor
from retry_runner.retry.exceptions import ConfigurationError
from retry_runner.retry.metadata import AttemptRecord
from retry_runner.retry.policy import RetryPolicyResolver

__all__ = [
    "AttemptRecord",
    "BackoffScheduler",
    "ConfigurationError",
    "ExceptionMatcher",
    "GlobalRetryBudget",
    "MessageMatcher",
    "PredicateMatcher",
    "RetryBudget",
    "RetryExecutor",
    "RetryPolicyResolver",
    "SettingsBudget",
    "TypeMatcher",
    "as_matcher",
    "default_budget",
    "matches",
    "reset_global_budget",
]
