"""
Data models for the retry runner.

Includes:
- TestCase and its typed RetryOptions
- RetryPolicy (effective retry decision for one test)
- Enums (TerminationReason, CountSource)
"""

from retry_runner.models.enums import CountSource, TerminationReason
from retry_runner.models.policy import RetryPolicy
from retry_runner.models.test_case import RetryOptions, TestCase

__all__ = [
    "CountSource",
    "TerminationReason",
    "RetryPolicy",
    "RetryOptions",
    "TestCase",
]
