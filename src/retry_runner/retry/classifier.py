"""
Exception classification for hard-fail and retry lists.

Each configured entry is adapted to the ExceptionMatcher protocol. Entries
may be:

1. **Exception class**: matches instances of the class and its subclasses
2. **Class with ``__retry_match__``**: the class's own match relation is
   consulted in addition to ``isinstance`` (e.g., match on message text)
3. **Matcher object**: anything with a ``matches(exc) -> bool`` method
4. **Predicate**: any other callable taking the exception

Usage:
    >>> matches([TimeoutError, MessageMatcher("connection reset")], exc)
"""

import re
from collections.abc import Iterable
from typing import Any, Callable, Protocol, runtime_checkable

from retry_runner.retry.exceptions import ConfigurationError


@runtime_checkable
class ExceptionMatcher(Protocol):
    """Protocol for exception classifiers."""

    def matches(self, exc: BaseException) -> bool:
        ...


class TypeMatcher:
    """Structural match: ``isinstance`` plus the class's own ``__retry_match__`` relation."""

    def __init__(self, exc_type: type):
        self.exc_type = exc_type

    def matches(self, exc: BaseException) -> bool:
        if isinstance(exc, self.exc_type):
            return True
        custom = getattr(self.exc_type, "__retry_match__", None)
        return bool(custom(exc)) if custom is not None else False

    def __repr__(self) -> str:
        return f"TypeMatcher({self.exc_type.__name__})"


class PredicateMatcher:
    """Custom match relation supplied as a callable."""

    def __init__(self, predicate: Callable[[BaseException], Any]):
        self.predicate = predicate

    def matches(self, exc: BaseException) -> bool:
        return bool(self.predicate(exc))

    def __repr__(self) -> str:
        return f"PredicateMatcher({getattr(self.predicate, '__name__', self.predicate)!r})"


class MessageMatcher:
    """Matches exceptions whose message matches a regular expression."""

    def __init__(self, pattern: str, exc_type: type = BaseException):
        self.pattern = re.compile(pattern)
        self.exc_type = exc_type

    def matches(self, exc: BaseException) -> bool:
        return isinstance(exc, self.exc_type) and self.pattern.search(str(exc)) is not None

    def __repr__(self) -> str:
        return f"MessageMatcher({self.pattern.pattern!r})"


def as_matcher(entry: Any) -> ExceptionMatcher:
    """
    Adapt a configured classifier entry to an ExceptionMatcher.

    Raises:
        ConfigurationError: If the entry cannot classify exceptions
    """
    if isinstance(entry, type):
        return TypeMatcher(entry)
    if isinstance(entry, ExceptionMatcher):
        return entry
    if callable(entry):
        return PredicateMatcher(entry)
    raise ConfigurationError(
        "Exception classifier must be a class, a matcher or a callable",
        {"entry": repr(entry), "entry_type": type(entry).__name__},
    )


def matches(classifiers: Iterable[Any], exc: BaseException) -> bool:
    """Return True if any classifier in the list matches the exception."""
    return any(as_matcher(entry).matches(exc) for entry in classifiers)
