"""Metrics instrumentation for the retry runner.

Exports Prometheus counters describing retry behaviour across a run.
"""

from retry_runner.monitoring.metrics import (
    retries_total,
    retry_attempts_total,
    retry_backoff_seconds,
    retry_budget_denials_total,
    retry_terminations_total,
)

__all__ = [
    "retry_attempts_total",
    "retries_total",
    "retry_terminations_total",
    "retry_budget_denials_total",
    "retry_backoff_seconds",
]
