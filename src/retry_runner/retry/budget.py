"""
Process-wide retry budget.

Limits how many distinct tests may consume extra attempts during one run.
A test is charged the first time one of its attempts fails; once charged it
keeps retrying to completion no matter how many other tests are charged
afterwards.

The budget is the only state shared between concurrently running attempt
loops, so every check-and-charge happens under a lock.

Executors that are not given their own budget share ``default_budget``
through a SettingsBudget, which reads the limit from their settings on
every decision.
"""

import threading
from typing import Callable, Hashable, Optional, Protocol

import structlog

from retry_runner.monitoring.metrics import retry_budget_denials_total

logger = structlog.get_logger(__name__)


class RetryBudget(Protocol):
    """Interface the executor and resolver use to consult a budget."""

    @property
    def max_retries(self) -> Optional[int]:
        ...

    @property
    def charged_count(self) -> int:
        ...

    def reset(self) -> None:
        ...

    def is_charged(self, identity: Hashable) -> bool:
        ...

    def admits(self, identity: Hashable) -> bool:
        ...

    def try_consume(self, identity: Hashable) -> bool:
        ...


def _check_limit(max_retries: Optional[int]) -> None:
    if max_retries is not None and max_retries < 0:
        raise ValueError("max_retries must be >= 0 or None")


class GlobalRetryBudget:
    """
    Set of charged test identities capped at ``max_retries``.

    ``max_retries=None`` disables the budget: every call is admitted and
    nothing is recorded. ``admits_within`` and ``consume_within`` take the
    limit per call, so several views with different limits can share one
    set of charges.
    """

    def __init__(self, max_retries: Optional[int] = None):
        _check_limit(max_retries)
        self._max_retries = max_retries
        self._charged: set[Hashable] = set()
        self._lock = threading.Lock()

    @property
    def max_retries(self) -> Optional[int]:
        return self._max_retries

    @property
    def enabled(self) -> bool:
        return self._max_retries is not None

    def configure(self, max_retries: Optional[int]) -> None:
        """Change the limit; charged identities are kept."""
        _check_limit(max_retries)
        with self._lock:
            self._max_retries = max_retries

    def reset(self) -> None:
        """Forget every charged identity (start of a top-level run)."""
        with self._lock:
            self._charged = set()
        logger.debug("Retry budget reset", max_retries=self._max_retries)

    @property
    def charged_count(self) -> int:
        with self._lock:
            return len(self._charged)

    def is_charged(self, identity: Hashable) -> bool:
        with self._lock:
            return identity in self._charged

    def admits(self, identity: Hashable) -> bool:
        """Whether ``identity`` could retry right now, without charging it."""
        return self.admits_within(identity, self._max_retries)

    def try_consume(self, identity: Hashable) -> bool:
        """
        Charge ``identity`` against the budget.

        Returns:
            True if the identity is (now or already) charged, False if the
            budget is exhausted and it was never charged before.
        """
        return self.consume_within(identity, self._max_retries)

    def admits_within(self, identity: Hashable, max_retries: Optional[int]) -> bool:
        with self._lock:
            if max_retries is None or identity in self._charged:
                return True
            return len(self._charged) < max_retries

    def consume_within(self, identity: Hashable, max_retries: Optional[int]) -> bool:
        with self._lock:
            if max_retries is None or identity in self._charged:
                return True
            if len(self._charged) >= max_retries:
                denied = True
            else:
                self._charged.add(identity)
                denied = False
            charged = len(self._charged)

        if denied:
            retry_budget_denials_total.inc()
            logger.info(
                "Retry budget exhausted",
                identity=repr(identity),
                max_retries=max_retries,
            )
            return False

        logger.debug(
            "Retry budget charged",
            identity=repr(identity),
            charged=charged,
            max_retries=max_retries,
        )
        return True


class SettingsBudget:
    """
    Shared budget whose limit is read from ``limit()`` on every decision.

    Charges live in the wrapped GlobalRetryBudget, so every view over the
    same budget counts the same tests.

    Attributes:
        budget: Budget holding the charged identities
        limit: Returns the current limit (None = disabled)
    """

    def __init__(self, budget: GlobalRetryBudget, limit: Callable[[], Optional[int]]):
        self.budget = budget
        self.limit = limit

    @property
    def max_retries(self) -> Optional[int]:
        max_retries = self.limit()
        _check_limit(max_retries)
        return max_retries

    @property
    def charged_count(self) -> int:
        return self.budget.charged_count

    def reset(self) -> None:
        self.budget.reset()

    def is_charged(self, identity: Hashable) -> bool:
        return self.budget.is_charged(identity)

    def admits(self, identity: Hashable) -> bool:
        return self.budget.admits_within(identity, self.max_retries)

    def try_consume(self, identity: Hashable) -> bool:
        return self.budget.consume_within(identity, self.max_retries)


# Process-wide budget shared by executors that are not given their own
default_budget = GlobalRetryBudget()


def reset_global_budget() -> None:
    """Reset the process-wide budget (call at run boundaries)."""
    default_budget.reset()
