# topmark:header:start
#
#   project      : ThrowLine
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the ThrowLine test suite.

This file sets up global fixtures and customizes the logging configuration for test runs,
ensuring consistent and verbose logging output during testing.

Notes:
    Tests should never publish on the process-wide `default_bus` unless they
    restore it; use the `bus` fixture, which provides an isolated bus whose
    advisory sink records what it receives.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from throwline.config import logging
from throwline.throw.bus import NotificationBus, default_bus

if TYPE_CHECKING:
    from collections.abc import Iterator

    from throwline.throw.model import Throw

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.hypothesis_slow`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_hypothesis_slow: DecoratorType[Any] = as_typed_mark(pytest.mark.hypothesis_slow)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_throwline_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure ThrowLine's runtime log level is not forced via env during tests.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV_VAR, raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the logging level to TRACE so the whole throw flow is captured.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


class SinkRecorder:
    """Advisory sink that keeps every record it receives."""

    def __init__(self) -> None:
        self.received: list[Throw] = []

    def __call__(self, throw: Throw) -> None:
        self.received.append(throw)


@pytest.fixture
def sink() -> SinkRecorder:
    """Return a fresh recording advisory sink."""
    return SinkRecorder()


@pytest.fixture
def bus(sink: SinkRecorder) -> NotificationBus:
    """Return an isolated bus whose advisory sink is the `sink` fixture."""
    return NotificationBus(advisory_sink=sink, name="test")


@pytest.fixture
def clean_default_bus() -> Iterator[NotificationBus]:
    """Yield the default bus and restore its subscribers and sink afterwards."""
    target: NotificationBus = default_bus()
    handlers = target.handlers
    advisory_sink = target.advisory_sink
    target.clear()
    try:
        yield target
    finally:
        target.clear()
        for handler in handlers:
            target.subscribe(handler)
        target.advisory_sink = advisory_sink
