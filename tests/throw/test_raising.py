# topmark:header:start
#
#   project      : ThrowLine
#   file         : test_raising.py
#   file_relpath : tests/throw/test_raising.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the raising operations and their severity policy.

Each test publishes on an isolated bus (the `bus` fixture) so subscribers and
unhandled advisories never leak between tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from tests.conftest import parametrize
from throwline.throw.model import Advisory, Throw, ThrowMode
from throwline.throw.raising import (
    Thrower,
    advisory,
    build_error,
    initial_handled,
    resolve_id_and_message,
    rethrow_framework,
    rethrow_hard,
    rethrow_soft,
    should_raise,
    throw_framework,
    throw_hard,
    throw_soft,
)

if TYPE_CHECKING:
    from tests.conftest import SinkRecorder
    from throwline.throw.bus import NotificationBus


def _handle(_sender: Any, throw: Throw) -> None:
    throw.handled = True


def _unhandle(_sender: Any, throw: Throw) -> None:
    throw.handled = False


# ------------------------------ Policy ------------------------------


@parametrize(
    "mode, throw, expected",
    [
        (ThrowMode.HARD, None, False),
        (ThrowMode.HARD, True, False),
        (ThrowMode.HARD, False, False),
        (ThrowMode.SOFT, None, True),
        (ThrowMode.SOFT, True, False),
        (ThrowMode.SOFT, False, True),
        (ThrowMode.FRAMEWORK, None, False),
        (ThrowMode.FRAMEWORK, True, False),
        (ThrowMode.FRAMEWORK, False, True),
        (ThrowMode.ADVISORY, None, False),
    ],
)
def test_initial_handled(mode: ThrowMode, throw: bool | None, expected: bool) -> None:
    """Each mode starts with the documented ``handled`` value."""
    assert initial_handled(mode, throw) is expected


def test_should_raise_never_for_advisory() -> None:
    """An unhandled advisory record never raises."""
    record = Advisory(Exception("info"), "id")
    assert record.handled is False
    assert should_raise(record) is False


# ------------------------------ Hard ------------------------------


def test_hard_raises_without_subscribers(bus: NotificationBus) -> None:
    """HARD raises the new error when nobody handles it."""
    with pytest.raises(ValueError, match="Unknown key"):
        throw_hard(None, ValueError, "Unknown key", bus=bus)


def test_hard_suppressed_by_subscriber(bus: NotificationBus) -> None:
    """A subscriber that handles a HARD record stops the raise."""
    bus.subscribe(_handle)
    record: Throw = throw_hard(None, ValueError, "Unknown key", bus=bus)
    assert record.handled is True
    assert record.mode is ThrowMode.HARD
    assert isinstance(record.error, ValueError)


def test_hard_suppressed_by_throw_false(bus: NotificationBus) -> None:
    """``throw=False`` suppresses a HARD record even when a subscriber un-handles it."""
    bus.subscribe(_unhandle)
    record: Throw = throw_hard(None, ValueError, "Unknown key", throw=False, bus=bus)
    assert record.handled is False
    assert record.throw_requested is False


def test_hard_throw_true_still_raises(bus: NotificationBus) -> None:
    """``throw=True`` keeps the default HARD behavior."""
    with pytest.raises(ValueError):
        throw_hard(None, ValueError, "x", throw=True, bus=bus)


def test_raised_error_is_the_published_instance(bus: NotificationBus) -> None:
    """The propagating exception is the record's own error, not a wrapper."""
    seen: list[Throw] = []
    bus.subscribe(lambda _s, t: seen.append(t))
    with pytest.raises(LookupError) as excinfo:
        throw_hard(None, LookupError, "gone", bus=bus)
    assert len(seen) == 1
    assert excinfo.value is seen[0].error


# ------------------------------ Soft ------------------------------


def test_soft_is_quiet_by_default(bus: NotificationBus) -> None:
    """SOFT starts handled, so nothing raises without a subscriber."""
    record: Throw = throw_soft(None, TimeoutError, "slow", bus=bus)
    assert record.handled is True
    assert record.mode is ThrowMode.SOFT


def test_soft_escalated_by_subscriber(bus: NotificationBus) -> None:
    """A subscriber escalates a SOFT record by setting ``handled = False``."""
    bus.subscribe(_unhandle)
    with pytest.raises(TimeoutError):
        throw_soft(None, TimeoutError, "slow", bus=bus)


def test_soft_throw_true_raises_unless_handled(bus: NotificationBus) -> None:
    """``throw=True`` makes SOFT raise, and a subscriber can still handle it."""
    with pytest.raises(TimeoutError):
        throw_soft(None, TimeoutError, "slow", throw=True, bus=bus)

    bus.subscribe(_handle)
    record: Throw = throw_soft(None, TimeoutError, "slow", throw=True, bus=bus)
    assert record.handled is True


# ------------------------------ Framework ------------------------------


def test_framework_raises_by_default(bus: NotificationBus) -> None:
    """FRAMEWORK raises when nobody handles it."""
    with pytest.raises(RuntimeError, match="inconsistent"):
        throw_framework(None, RuntimeError, "inconsistent", bus=bus)


def test_framework_throw_false_downgrades(bus: NotificationBus) -> None:
    """``throw=False`` starts a FRAMEWORK record handled."""
    record: Throw = throw_framework(None, RuntimeError, "inconsistent", throw=False, bus=bus)
    assert record.handled is True


def test_framework_downgrade_can_be_escalated(bus: NotificationBus) -> None:
    """A subscriber can un-handle a downgraded FRAMEWORK record."""
    bus.subscribe(_unhandle)
    with pytest.raises(RuntimeError):
        throw_framework(None, RuntimeError, "inconsistent", throw=False, bus=bus)


def test_framework_handled_by_subscriber(bus: NotificationBus) -> None:
    """A subscriber that handles a FRAMEWORK record stops the raise."""
    bus.subscribe(_handle)
    record: Throw = throw_framework(None, RuntimeError, "inconsistent", bus=bus)
    assert record.handled is True


# ------------------------------ Advisory ------------------------------


def test_advisory_unhandled_goes_to_sink(bus: NotificationBus, sink: SinkRecorder) -> None:
    """An unhandled advisory reaches the advisory sink exactly once."""
    record: Advisory = advisory(None, "Falling back to defaults", bus=bus)
    assert sink.received == [record]
    assert record.mode is ThrowMode.ADVISORY
    assert record.message == "Falling back to defaults"
    assert record.message_id == "test_advisory_unhandled_goes_to_sink"


def test_advisory_handled_skips_sink(bus: NotificationBus, sink: SinkRecorder) -> None:
    """A handled advisory is not emitted by the sink."""
    bus.subscribe(_handle)
    advisory(None, "Falling back to defaults", bus=bus)
    assert sink.received == []


def test_advisory_unhandle_never_raises(bus: NotificationBus, sink: SinkRecorder) -> None:
    """Even an explicitly un-handled advisory does not raise."""
    bus.subscribe(_unhandle)
    record: Advisory = advisory(None, "A.1", "note", bus=bus)
    assert record.message_id == "A.1"
    assert record.message == "note"
    assert sink.received == [record]


def test_advisory_sink_failure_is_contained(bus: NotificationBus) -> None:
    """A failing advisory sink does not disrupt the caller."""

    def _broken(_throw: Throw) -> None:
        raise OSError("disk full")

    bus.advisory_sink = _broken
    record: Advisory = advisory(None, "note", bus=bus)
    assert record.handled is False


# ------------------------------ Identifiers ------------------------------


def test_one_argument_uses_caller_as_id(bus: NotificationBus) -> None:
    """With one free-text argument, the id is the calling function's name."""
    record: Throw = throw_soft(None, ValueError, "bad input", bus=bus)
    assert record.message_id == "test_one_argument_uses_caller_as_id"
    assert record.message == "bad input"
    assert record.caller == "test_one_argument_uses_caller_as_id"
    assert record.formatted_message == "test_one_argument_uses_caller_as_id | bad input"


def test_two_arguments_give_id_and_message(bus: NotificationBus) -> None:
    """With two free-text arguments, the first is the id."""
    record: Throw = throw_soft(None, ValueError, "251019.A", "bad input", bus=bus)
    assert record.message_id == "251019.A"
    assert record.message == "bad input"
    assert str(record.error) == "bad input"


@parametrize("blank", [None, "", "   "])
def test_blank_message_becomes_type_name(bus: NotificationBus, blank: str | None) -> None:
    """A blank message falls back to the error type name."""
    record: Throw = throw_soft(None, ValueError, blank, bus=bus)
    assert record.message == "ValueError"
    assert record.message_id == "test_blank_message_becomes_type_name"


def test_blank_id_becomes_type_name(bus: NotificationBus) -> None:
    """A blank id (two-argument form) falls back to the error type name."""
    record: Throw = throw_soft(None, KeyError, " ", "missing", bus=bus)
    assert record.message_id == "KeyError"
    assert record.message == "missing"


def test_explicit_caller_overrides_capture(bus: NotificationBus) -> None:
    """An explicit ``caller`` replaces the captured function name."""
    record: Throw = throw_soft(None, ValueError, "x", caller="parse_header", bus=bus)
    assert record.message_id == "parse_header"


def test_resolve_id_and_message() -> None:
    """Identifier resolution covers both argument forms."""
    assert resolve_id_and_message("T", "msg", None, "fn") == ("fn", "msg")
    assert resolve_id_and_message("T", "id", "msg", "fn") == ("id", "msg")
    assert resolve_id_and_message("T", None, None, "fn") == ("fn", "T")


# ------------------------------ Error construction ------------------------------


def test_factory_failure_falls_back_to_exception(bus: NotificationBus) -> None:
    """A factory that raises is replaced by a plain Exception with the message."""

    def _bad_factory(message: str) -> BaseException:
        raise TypeError(message)

    with pytest.raises(Exception, match="fallback") as excinfo:
        throw_hard(None, _bad_factory, "fallback", bus=bus)
    assert type(excinfo.value) is Exception


def test_factory_returning_non_exception_falls_back() -> None:
    """A factory that returns a non-exception is replaced as well."""
    error: BaseException = build_error(lambda m: m, "plain")  # type: ignore[arg-type,return-value]
    assert type(error) is Exception
    assert str(error) == "plain"


def test_custom_exception_factory(bus: NotificationBus) -> None:
    """Any callable returning an exception can build the underlying error."""

    class ParseError(Exception):
        def __init__(self, message: str, line: int = 0) -> None:
            super().__init__(message)
            self.line = line

    record: Throw = throw_soft(None, lambda m: ParseError(m, line=7), "bad", bus=bus)
    assert isinstance(record.error, ParseError)
    assert record.error.line == 7


# ------------------------------ Rethrow ------------------------------


def test_rethrow_keeps_error_text(bus: NotificationBus) -> None:
    """Without free text, a rethrow keeps the error's own message."""
    error = ValueError("boom")
    record: Throw = rethrow_soft(None, error, bus=bus)
    assert record.error is error
    assert record.message == "boom"
    assert record.message_id == "test_rethrow_keeps_error_text"
    assert record.mode is ThrowMode.SOFT


def test_rethrow_blank_error_text_uses_type_name(bus: NotificationBus) -> None:
    """An error without text is described by its type name."""
    record: Throw = rethrow_soft(None, ValueError(), bus=bus)
    assert record.message == "ValueError"


def test_rethrow_hard_raises_same_instance(bus: NotificationBus) -> None:
    """A HARD rethrow propagates the very instance it was given."""
    error = OSError("io")
    with pytest.raises(OSError) as excinfo:
        rethrow_hard(None, error, "reading config", bus=bus)
    assert excinfo.value is error


def test_rethrow_modes(bus: NotificationBus) -> None:
    """Each rethrow form carries its own mode."""
    modes: list[ThrowMode] = []

    def _record(_sender: Any, throw: Throw) -> None:
        modes.append(throw.mode)
        throw.handled = True

    bus.subscribe(_record)
    rethrow_hard(None, ValueError("a"), bus=bus)
    rethrow_soft(None, ValueError("b"), bus=bus)
    rethrow_framework(None, ValueError("c"), bus=bus)
    assert modes == [ThrowMode.HARD, ThrowMode.SOFT, ThrowMode.FRAMEWORK]


def test_rethrow_with_id_and_message(bus: NotificationBus) -> None:
    """The two-argument form overrides both id and message."""
    record: Throw = rethrow_framework(
        None, ValueError("inner"), "R.1", "wrapped", throw=False, bus=bus
    )
    assert (record.message_id, record.message) == ("R.1", "wrapped")
    assert str(record.error) == "inner"


# ------------------------------ Bus interaction ------------------------------


def test_sender_is_passed_to_subscribers(bus: NotificationBus) -> None:
    """Subscribers receive the sender given to the raising operation."""
    senders: list[Any] = []
    owner = object()
    bus.subscribe(lambda s, _t: senders.append(s))
    throw_soft(owner, ValueError, "x", bus=bus)
    assert senders == [owner]


def test_subscriber_exception_propagates(bus: NotificationBus) -> None:
    """An exception raised by a subscriber replaces the raise decision."""

    def _explode(_sender: Any, _throw: Throw) -> None:
        raise ZeroDivisionError("subscriber bug")

    bus.subscribe(_explode)
    with pytest.raises(ZeroDivisionError):
        throw_soft(None, ValueError, "x", bus=bus)


def test_default_bus_used_when_none_given(clean_default_bus: NotificationBus) -> None:
    """Operations without ``bus`` publish on the default bus."""
    seen: list[Throw] = []
    clean_default_bus.subscribe(lambda _s, t: seen.append(t))
    throw_soft(None, ValueError, "x")
    assert len(seen) == 1


# ------------------------------ Mixin ------------------------------


class Widget(Thrower):
    """Minimal component raising through the mixin."""

    def __init__(self, bus: NotificationBus) -> None:
        self.throw_bus = bus

    def load(self) -> Throw:
        return self.throw_soft(ValueError, "cannot load")

    def save(self) -> Throw:
        return self.throw_hard(PermissionError, "W.1", "read-only")

    def note(self) -> Advisory:
        return self.advisory("using cache")

    def retry(self, error: BaseException) -> Throw:
        return self.rethrow_framework(error, throw=False)


def test_mixin_publishes_on_its_bus_with_caller(bus: NotificationBus) -> None:
    """Mixin methods use ``throw_bus``, pass ``self`` as sender and capture the method name."""
    senders: list[Any] = []
    bus.subscribe(lambda s, _t: senders.append(s))
    widget = Widget(bus)

    record: Throw = widget.load()
    assert record.message_id == "load"
    assert senders == [widget]


def test_mixin_hard_and_advisory(bus: NotificationBus, sink: SinkRecorder) -> None:
    """Mixin HARD raises; mixin advisories reach the sink."""
    widget = Widget(bus)
    with pytest.raises(PermissionError, match="read-only"):
        widget.save()

    note: Advisory = widget.note()
    assert note.message_id == "note"
    assert sink.received == [note]


def test_mixin_rethrow(bus: NotificationBus) -> None:
    """Mixin rethrow keeps the error and captures the method name."""
    error = RuntimeError("stale")
    record: Throw = Widget(bus).retry(error)
    assert record.error is error
    assert record.message_id == "retry"
    assert record.mode is ThrowMode.FRAMEWORK
