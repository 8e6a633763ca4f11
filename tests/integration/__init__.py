"""
Integration tests for the retry runner.

Run whole suites through SuiteRunner -> RetryExecutor -> CallableHost with
real backoff waits and the process-wide budget.
"""
