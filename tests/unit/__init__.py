"""
Unit tests for the retry runner.

Test individual components in isolation:
- Exception classifier (type, custom relation, predicate matchers)
- Backoff scheduler (fixed and exponential waits)
- Global retry budget (idempotence, exhaustion, concurrency)
- Policy resolver (precedence, floor, skip and budget gates)
- Retry executor (attempt loop and lifecycle signals)
- Reference host and suite runner
"""
