"""
Retry engine exceptions.

A test's own failures are never raised by the engine; they stay on the
test (``TestCase.exception`` and ``retry_exceptions``) for the host to
report. The only exception the engine raises itself is ConfigurationError,
for retry settings it cannot make sense of. Errors raised by user-supplied
predicates (skip_retry_if, retry_count_condition) propagate unwrapped.
"""

from typing import Any


class ConfigurationError(Exception):
    """
    Raised when retry configuration is invalid.
    
    Examples:
    - Retry count that cannot be read as an integer
    - Exception classifier entry that is neither a class nor a matcher
    """
    
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize configuration error.
        
        Args:
            message: Human-readable error description
            details: Structured error data for logging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message
