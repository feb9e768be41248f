# topmark:header:start
#
#   project      : ThrowLine
#   file         : ledger.py
#   file_relpath : src/throwline/throw/ledger.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-object ledger of signal records.

A `Throwable` object keeps the records raised on its behalf so it can act on
its own history during the throw flow, e.g. retry after clearing, or cancel.
This is bookkeeping only; the ledger never changes a raise decision unless
`ThrowLedger.collect` is asked to handle what it records.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Protocol

from throwline.config.logging import get_logger
from throwline.throw.model import ThrowableStatus, ThrowMode

if TYPE_CHECKING:
    from collections.abc import Iterator

    from throwline.config.logging import ThrowlineLogger
    from throwline.throw.bus import NotificationBus
    from throwline.throw.model import Throw

logger: ThrowlineLogger = get_logger(__name__)


class Throwable(Protocol):
    """Structural interface for objects that track their own throws."""

    def append_throw(self, thrown: Throw) -> None:
        """Record one signal record."""
        ...

    def get_throws(self) -> tuple[Throw, ...]:
        """Return the recorded signal records in append order."""
        ...

    def clear_throws(self) -> None:
        """Forget the recorded signal records and start a retry cycle."""
        ...

    def get_throwable_status(self) -> ThrowableStatus:
        """Return the combined status bits."""
        ...


class ThrowLedger:
    """Default `Throwable` implementation.

    Attributes:
        cancel (bool): Set by the owner to request cancellation; reported as
            `ThrowableStatus.CANCEL`.
    """

    def __init__(self) -> None:
        self._throws: list[Throw] = []
        self._thrown_count: int = 0
        self._retry_count: int = 0
        self.cancel: bool = False

    @property
    def thrown_count(self) -> int:
        """Records appended since the last clear."""
        return self._thrown_count

    @property
    def retry_count(self) -> int:
        """Number of clears so far."""
        return self._retry_count

    def append_throw(self, thrown: Throw) -> None:
        self._throws.append(thrown)
        self._thrown_count += 1

    def get_throws(self) -> tuple[Throw, ...]:
        return tuple(self._throws)

    def clear_throws(self) -> None:
        self._throws.clear()
        self._retry_count += 1
        self._thrown_count = 0
        logger.debug("Ledger cleared; retry cycle %d", self._retry_count)

    def get_throwable_status(self) -> ThrowableStatus:
        status = ThrowableStatus.OK
        if self.cancel:
            status |= ThrowableStatus.CANCEL
        if self._thrown_count != 0:
            status |= ThrowableStatus.THROWN
        if self._retry_count != 0:
            status |= ThrowableStatus.RETRY
        return status

    @contextmanager
    def collect(
        self,
        bus: NotificationBus,
        *,
        sender: Any = None,
        handle: bool = False,
    ) -> Iterator[ThrowLedger]:
        """Append every record published on ``bus`` while the block runs.

        Args:
            bus (NotificationBus): The bus to listen on.
            sender (Any): If given, only records published by this sender
                (compared by identity) are collected.
            handle (bool): Mark collected records as handled, which suppresses
                HARD/FRAMEWORK raises and routes advisories away from the sink.

        Yields:
            ThrowLedger: This ledger.
        """

        def _on_throw(published_by: Any, thrown: Throw) -> None:
            if sender is not None and published_by is not sender:
                return
            self.append_throw(thrown)
            if handle:
                thrown.handled = True

        with bus.subscribed(_on_throw):
            yield self

    def to_dict(self) -> dict[str, int]:
        """Return a JSON-friendly mapping of record counts by mode key."""
        counts: dict[str, int] = {mode.key: 0 for mode in ThrowMode}
        for thrown in self._throws:
            counts[thrown.mode.key] += 1
        return counts

    def __iter__(self) -> Iterator[Throw]:
        return iter(self._throws)

    def __len__(self) -> int:
        return len(self._throws)
