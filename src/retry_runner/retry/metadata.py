"""
Attempt history for a single test.

This module defines the AttemptRecord dataclass returned by the executor
once a test's attempt loop has terminated.
"""

from dataclasses import dataclass, field

from retry_runner.models.enums import TerminationReason


@dataclass(frozen=True)
class AttemptRecord:
    """
    Complete attempt history of one test.
    
    Attributes:
        attempts: Attempts completed (>= 1)
        exceptions: Failures in the order they happened (one per failed attempt)
        reason: Why the loop stopped
        retry_count: Effective retry count when the loop stopped (None if the
            policy was never resolved: first attempt passed or budget refused)
        total_wait_seconds: Sum of backoff waits applied between attempts
    """

    attempts: int
    reason: TerminationReason
    retry_count: int | None = None
    exceptions: list[BaseException] = field(default_factory=list)
    total_wait_seconds: float = 0.0

    def __post_init__(self) -> None:
        """Validate record invariants."""
        if self.attempts < 1:
            raise ValueError("attempts must be >= 1")
        
        failures_expected = self.attempts - 1 if self.succeeded else self.attempts
        if len(self.exceptions) != failures_expected:
            raise ValueError(
                f"expected {failures_expected} exceptions for {self.attempts} attempts "
                f"({self.reason.value}), got {len(self.exceptions)}"
            )
        
        if self.total_wait_seconds < 0:
            raise ValueError("total_wait_seconds must be >= 0")

    @property
    def succeeded(self) -> bool:
        return self.reason is TerminationReason.SUCCEEDED

    @property
    def retries(self) -> int:
        """Re-runs performed after the first attempt."""
        return self.attempts - 1

    @property
    def last_exception(self) -> BaseException | None:
        if self.succeeded or not self.exceptions:
            return None
        return self.exceptions[-1]
