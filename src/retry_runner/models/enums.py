"""
Enumerations for retry runner data models.
"""

from enum import Enum


class TerminationReason(str, Enum):
    """
    Why an attempt loop stopped.
    
    SUCCEEDED is the only passing outcome; every other value leaves the
    last attempt's failure on the test for the host to report.
    """
    
    SUCCEEDED = "succeeded"
    RETRY_COUNT_REACHED = "retry_count_reached"
    HARD_FAIL = "hard_fail"
    NON_RETRYABLE = "non_retryable"
    BUDGET_EXHAUSTED = "budget_exhausted"
    SKIPPED = "skipped"


class CountSource(str, Enum):
    """Configuration source that produced a nominal retry count."""
    
    OVERRIDE = "override"
    TEST = "test"
    CONDITION = "condition"
    DEFAULT = "default"
