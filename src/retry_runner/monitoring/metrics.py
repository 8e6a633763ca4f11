"""Prometheus metrics for the retry runner.

Collected in the default registry; expose them with
``prometheus_client.start_http_server`` or push them from CI with
``prometheus_client.push_to_gateway``. Useful alert signals:
- retries_total (rising rate indicates growing flakiness)
- retry_budget_denials_total (budget too small for the suite)
"""

from prometheus_client import Counter, Histogram

# === Attempt Metrics ===

retry_attempts_total = Counter(
    "retry_attempts_total",
    "Total test attempts executed by outcome",
    ["outcome"],
)
"""
Attempts counter by outcome.

Labels:
- outcome: passed, failed
"""

retries_total = Counter(
    "retries_total",
    "Total re-runs of failed tests (attempts after the first)",
)

# === Termination Metrics ===

retry_terminations_total = Counter(
    "retry_terminations_total",
    "Total attempt loops terminated by reason",
    ["reason"],
)
"""
Terminations counter by reason.

Labels:
- reason: succeeded, retry_count_reached, hard_fail, non_retryable,
  budget_exhausted, skipped
"""

# === Budget Metrics ===

retry_budget_denials_total = Counter(
    "retry_budget_denials_total",
    "Total failed tests denied a retry because the global budget was exhausted",
)

# === Backoff Metrics ===

retry_backoff_seconds = Histogram(
    "retry_backoff_seconds",
    "Backoff wait applied between attempts",
    buckets=[0.001, 0.01, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
