# topmark:header:start
#
#   project      : ThrowLine
#   file         : bus.py
#   file_relpath : src/throwline/throw/bus.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Notification bus shared by all raising operations.

Every raise publishes exactly one `Throw` on a `NotificationBus` before its
severity policy is applied. Subscribers run synchronously, in registration
order, and receive the record by reference: setting ``throw.handled`` is how a
subscriber suppresses or escalates the raise.

Components that raise should hold a reference to the bus they publish on.
`default_bus` exists for code that has no bus injected.

Notes:
    * The subscriber list is guarded by an ``RLock`` and snapshotted at the
      start of each publish. Subscriptions changed while a publish is in
      flight (including from a subscriber) apply to later publishes only.
    * Prefer subscribing at setup/teardown boundaries, e.g. with
      `NotificationBus.subscribed`.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import contextmanager
from threading import RLock
from typing import TYPE_CHECKING, Any

from throwline.config.logging import get_logger
from throwline.config.types import AdvisorySinkKind
from throwline.core.introspection import format_callable_pretty
from throwline.throw.sinks import log_sink, null_sink, stream_sink

if TYPE_CHECKING:
    from collections.abc import Iterator

    from throwline.config.logging import ThrowlineLogger
    from throwline.config.model import Config
    from throwline.throw.model import Throw
    from throwline.throw.sinks import AdvisorySink

# ThrowHandler: a subscriber, called as handler(sender, throw).
ThrowHandler = Callable[[Any, "Throw"], None]

logger: ThrowlineLogger = get_logger(__name__)


class NotificationBus:
    """Synchronous publish/subscribe point for signal records.

    Args:
        advisory_sink (AdvisorySink | None): Where unhandled advisories are
            emitted; defaults to `log_sink`.
        name (str): Label used in log output.
    """

    def __init__(
        self,
        *,
        advisory_sink: AdvisorySink | None = None,
        name: str = "bus",
    ) -> None:
        self._lock = RLock()
        self._handlers: list[ThrowHandler] = []
        self._advisory_sink: AdvisorySink = advisory_sink or log_sink()
        self.name: str = name

    @classmethod
    def from_config(cls, config: Config, *, name: str = "bus") -> NotificationBus:
        """Return a bus whose advisory sink follows ``config``."""
        return cls(advisory_sink=sink_from_config(config), name=name)

    @property
    def advisory_sink(self) -> AdvisorySink:
        return self._advisory_sink

    @advisory_sink.setter
    def advisory_sink(self, sink: AdvisorySink) -> None:
        self._advisory_sink = sink

    @property
    def handlers(self) -> tuple[ThrowHandler, ...]:
        """Return a snapshot of the current subscribers, in registration order."""
        with self._lock:
            return tuple(self._handlers)

    def subscribe(self, handler: ThrowHandler) -> None:
        """Append ``handler`` to the subscriber list.

        A handler subscribed twice runs twice per publish.
        """
        with self._lock:
            self._handlers.append(handler)
        logger.trace("%s: subscribed %s", self.name, format_callable_pretty(handler))

    def unsubscribe(self, handler: ThrowHandler) -> bool:
        """Remove the most recently added occurrence of ``handler``.

        Returns:
            bool: True if removed, False if ``handler`` was not subscribed.
        """
        with self._lock:
            for i in range(len(self._handlers) - 1, -1, -1):
                if self._handlers[i] == handler:
                    del self._handlers[i]
                    logger.trace("%s: unsubscribed %s", self.name, format_callable_pretty(handler))
                    return True
        return False

    @contextmanager
    def subscribed(self, *handlers: ThrowHandler) -> Iterator[NotificationBus]:
        """Subscribe ``handlers`` for the duration of a ``with`` block.

        Yields:
            NotificationBus: This bus.
        """
        for handler in handlers:
            self.subscribe(handler)
        try:
            yield self
        finally:
            for handler in reversed(handlers):
                self.unsubscribe(handler)

    def clear(self) -> None:
        """Remove all subscribers."""
        with self._lock:
            self._handlers.clear()

    def publish(self, sender: Any, throw: Throw) -> None:
        """Invoke every current subscriber with ``(sender, throw)``.

        Exceptions raised by a subscriber propagate to the caller; the
        remaining subscribers are not invoked.
        """
        snapshot: tuple[ThrowHandler, ...] = self.handlers
        logger.trace(
            "%s: publishing %s %r to %d subscriber(s)",
            self.name,
            throw.mode.key,
            throw.message_id,
            len(snapshot),
        )
        for handler in snapshot:
            handler(sender, throw)

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def __repr__(self) -> str:
        return f"NotificationBus(name={self.name!r}, subscribers={len(self)})"


def sink_from_config(config: Config) -> AdvisorySink:
    """Build the advisory sink selected by ``config``."""
    if config.advisory_sink is AdvisorySinkKind.NONE:
        return null_sink
    if config.advisory_sink is AdvisorySinkKind.STREAM:
        return stream_sink(fmt=config.advisory_format, color=config.color)
    return log_sink(config.advisory_format)


_default_bus: NotificationBus = NotificationBus(name="default")


def default_bus() -> NotificationBus:
    """Return the process-wide bus used when no bus is injected."""
    return _default_bus
