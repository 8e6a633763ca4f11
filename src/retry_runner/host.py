"""
Host runtime interface.

The retry engine never executes test code itself. It drives a host that
knows how to run one attempt of a test, how to drop memoized fixture
values, and where reporter messages go.

CallableHost is a small in-process host that runs ``TestCase.body``
callables. It is what the test suite uses and is a reasonable starting
point for wiring the engine into another runtime.
"""

import sys
import threading
from typing import Any, Callable, Hashable, Iterable, Optional, Protocol, TextIO

import structlog

from retry_runner.models.test_case import TestCase

logger = structlog.get_logger(__name__)


class TestHost(Protocol):
    """
    Protocol for host runtimes driven by the RetryExecutor.

    ``run_once`` must execute exactly one attempt and leave its failure (or
    ``None``) in ``test.exception``; it must not raise for test failures.
    """

    def run_once(self, test: TestCase) -> None:
        ...

    def clear_fixtures(self, test: TestCase) -> None:
        ...

    def message(self, text: str) -> None:
        ...

    def notify_retry(self, test: TestCase) -> None:
        ...


class FixtureScope:
    """
    Lazily evaluated, memoized fixture values for one test.

    Values are computed on first access and reused by later attempts until
    the host clears the scope.
    """

    def __init__(self, factories: dict[str, Callable[[TestCase], Any]], test: TestCase):
        self._factories = factories
        self._values: dict[str, Any] = {}
        self.test = test

    def __getitem__(self, name: str) -> Any:
        if name not in self._values:
            if name not in self._factories:
                raise KeyError(f"Unknown fixture: {name}")
            self._values[name] = self._factories[name](self.test)
        return self._values[name]

    def is_memoized(self, name: str) -> bool:
        return name in self._values


class CallableHost:
    """
    In-process host running ``test.body(scope)`` once per attempt.

    After the body, every ``test.teardown`` hook runs with the same scope.
    A single error becomes ``test.exception``; several are grouped into an
    ExceptionGroup so reporters can show each of them.

    Attributes:
        fixtures: Fixture factories by name (each takes the TestCase)
        output: Stream receiving reporter messages
        listeners: Reporter objects; ``listener.retry(test)`` is called
            before every re-run when defined
    """

    def __init__(
        self,
        fixtures: Optional[dict[str, Callable[[TestCase], Any]]] = None,
        output: Optional[TextIO] = None,
        listeners: Iterable[Any] = (),
    ):
        self.fixtures = dict(fixtures or {})
        self.output = output if output is not None else sys.stdout
        self.listeners = list(listeners)
        self._scopes: dict[Hashable, FixtureScope] = {}
        self._lock = threading.Lock()

    def scope_for(self, test: TestCase) -> FixtureScope:
        with self._lock:
            scope = self._scopes.get(test.identity)
            if scope is None:
                scope = FixtureScope(self.fixtures, test)
                self._scopes[test.identity] = scope
            return scope

    def run_once(self, test: TestCase) -> None:
        scope = self.scope_for(test)
        errors: list[Exception] = []

        if test.body is not None:
            try:
                test.body(scope)
            except Exception as e:
                errors.append(e)

        for hook in test.teardown:
            try:
                hook(scope)
            except Exception as e:
                errors.append(e)

        if not errors:
            test.exception = None
        elif len(errors) == 1:
            test.exception = errors[0]
        else:
            test.exception = ExceptionGroup(
                f"{len(errors)} errors in {test.description}", errors
            )

    def clear_fixtures(self, test: TestCase) -> None:
        with self._lock:
            self._scopes.pop(test.identity, None)
        logger.debug("Fixtures cleared", test=test.description)

    def message(self, text: str) -> None:
        with self._lock:
            self.output.write(text + "\n")
            self.output.flush()

    def notify_retry(self, test: TestCase) -> None:
        for listener in self.listeners:
            retry_hook = getattr(listener, "retry", None)
            if retry_hook is not None:
                retry_hook(test)
