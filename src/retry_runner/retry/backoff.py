"""
Backoff between attempts.
"""

from retry_runner.config import Settings
from retry_runner.models.test_case import TestCase


class BackoffScheduler:
    """
    Computes the wait before the next attempt of a test.
    
    Fixed mode uses the test's ``retry_wait`` (or the process default).
    Exponential mode doubles that base after every completed attempt:
    ``base * 2 ** (attempts_so_far - 1)``.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def base_wait(self, test: TestCase) -> float:
        if test.options.retry_wait is not None:
            return float(test.options.retry_wait)
        return float(self.settings.DEFAULT_SLEEP_INTERVAL)

    def wait(self, attempts_so_far: int, test: TestCase) -> float:
        """
        Seconds to wait before the next attempt; <= 0 means do not sleep.
        
        Args:
            attempts_so_far: Attempts completed before this wait (>= 1)
            test: Test whose options select the mode
        """
        base = self.base_wait(test)
        if test.options.exponential_backoff:
            return base * 2 ** (attempts_so_far - 1)
        return base
