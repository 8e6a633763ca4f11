"""
Retry-on-failure engine for test runtimes.

Re-runs failing test cases selectively. For each test the engine decides:
- Whether to re-run and how many times (policy resolution)
- Which failures are eligible (exception classification)
- How long to wait between attempts (backoff)
- How many tests the whole run may retry (global budget)

Architecture: host runtime hook -> RetryExecutor -> host single-attempt primitive
"""

__version__ = "0.1.0"
