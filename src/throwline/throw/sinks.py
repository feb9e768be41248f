# topmark:header:start
#
#   project      : ThrowLine
#   file         : sinks.py
#   file_relpath : src/throwline/throw/sinks.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Best-effort sinks for advisories nobody handled.

A sink is any callable taking the unhandled record. Sinks never raise: a
failure to write is logged and dropped, since an advisory must not disrupt
control flow.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import IO, TYPE_CHECKING, Final

from throwline.config.logging import get_logger

if TYPE_CHECKING:
    from throwline.config.logging import ThrowlineLogger
    from throwline.throw.model import Throw, ThrowFormat

# AdvisorySink: receives each advisory that no subscriber handled.
AdvisorySink = Callable[["Throw"], None]

logger: ThrowlineLogger = get_logger(__name__)

ADVISORY_LOGGER_NAME: Final[str] = "throwline.advisory"


def render(throw: Throw, fmt: ThrowFormat | None) -> str:
    """Render a record for a sink: ``formatted_message`` unless ``fmt`` is given."""
    return throw.formatted_message if fmt is None else throw.to_string(fmt)


def log_sink(fmt: ThrowFormat | None = None) -> AdvisorySink:
    """Return a sink that logs at DEBUG on the ``throwline.advisory`` logger.

    Args:
        fmt (ThrowFormat | None): Fields to render; ``None`` logs ``formatted_message``.

    Returns:
        AdvisorySink: The sink.
    """
    advisory_logger: ThrowlineLogger = get_logger(ADVISORY_LOGGER_NAME)

    def _sink(throw: Throw) -> None:
        advisory_logger.debug("%s", render(throw, fmt))

    return _sink


def stream_sink(
    stream: IO[str] | None = None,
    *,
    fmt: ThrowFormat | None = None,
    color: bool = False,
) -> AdvisorySink:
    """Return a sink that writes one entry per advisory to a text stream.

    Args:
        stream (IO[str] | None): Target stream; ``None`` resolves ``sys.stderr``
            at write time so that redirection (and pytest capture) applies.
        fmt (ThrowFormat | None): Fields to render; ``None`` writes ``formatted_message``.
        color (bool): Colorize the entry with the mode color.

    Returns:
        AdvisorySink: The sink.
    """

    def _sink(throw: Throw) -> None:
        text: str = render(throw, fmt)
        if color:
            text = throw.mode.color(text)
        target: IO[str] = stream if stream is not None else sys.stderr
        try:
            target.write(text + "\n")
            target.flush()
        except (OSError, ValueError) as e:
            logger.debug("Advisory sink failed to write %r: %s", throw.message_id, e)

    return _sink


def null_sink(throw: Throw) -> None:  # pylint: disable=unused-argument
    """Discard the advisory."""
