# topmark:header:start
#
#   project      : ThrowLine
#   file         : model.py
#   file_relpath : src/throwline/throw/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Signal records, severity modes and rendering flags.

Sections:
    * ThrowMode: the four severity classes, with terminal colors.
    * ThrowableStatus: status bits reported by a `Throwable` ledger.
    * ThrowFormat: selectable fields for `Throw.to_string`, with presets.
    * Throw: the per-raise signal record handed to every bus subscriber.
    * Advisory: the informational flavor of `Throw`.

A `Throw` is read-only except for `handled`, which subscribers set during
publish to suppress or escalate the raising operation's default decision.
"""

from __future__ import annotations

import re
import traceback
from enum import Flag
from typing import TYPE_CHECKING, Any, cast

from yachalk import chalk

from throwline.core.enum_mixins import KeyedStrEnum, enum_from_name
from throwline.throw.annotations import careful

if TYPE_CHECKING:
    from collections.abc import Callable


class ThrowMode(KeyedStrEnum):
    """Severity class of a signal record.

    HARD:
        The library does not expect to recover. Raises on return unless a
        subscriber handles it or the call site passed ``throw=False``.
    SOFT:
        A non-critical condition, useful for try-style APIs. Handled when
        raised; raises only if a subscriber un-handles it.
    FRAMEWORK:
        An internal inconsistency that is not the consumer's fault. Raises by
        default; the call site can downgrade it with ``throw=False``.
    ADVISORY:
        Informational only. Never raises; unhandled advisories go to the
        bus's advisory sink.
    """

    HARD = ("hard", "Hard", ("throw_hard", "error"))
    SOFT = ("soft", "Soft", ("throw_soft", "warning"))
    FRAMEWORK = ("framework", "Framework", ("throw_framework", "internal"))
    ADVISORY = ("advisory", "Advisory", ("advise", "info"))

    @property
    def color(self) -> Callable[[str], str]:
        """Return the `yachalk` color function associated with this mode.

        Intended for human-readable output only; machine formats should not use colors.
        """
        return cast(
            "Callable[[str], str]",
            {
                ThrowMode.HARD: chalk.red_bright,
                ThrowMode.SOFT: chalk.yellow,
                ThrowMode.FRAMEWORK: chalk.magenta,
                ThrowMode.ADVISORY: chalk.blue,
            }[self],
        )


class ThrowableStatus(Flag):
    """Combined status bits of a `Throwable` object."""

    OK = 0
    CANCEL = 0x1
    THROWN = 0x2
    RETRY = 0x4


class ThrowFormat(Flag):
    """Fields rendered by `Throw.to_string`.

    Presets:
        BASIC: message id and message.
        TEST: mode, exception type, message id and message.
        FORENSIC: everything, including the traceback and the inner exception.
    """

    MODE = 0x01
    EXCEPTION_TYPE = 0x02
    MESSAGE_ID = 0x04
    MESSAGE = 0x08
    STACK_TRACE = 0x10
    INNER_EXCEPTION = 0x20

    BASIC = MESSAGE_ID | MESSAGE
    TEST = MODE | EXCEPTION_TYPE | MESSAGE_ID | MESSAGE
    FORENSIC = MODE | EXCEPTION_TYPE | MESSAGE_ID | MESSAGE | STACK_TRACE | INNER_EXCEPTION

    @classmethod
    def parse(cls, raw: str) -> ThrowFormat:
        """Parse a preset name or a list of field names.

        Accepts ``"basic"``, ``"test"``, ``"forensic"`` or field names joined with
        ``|`` or ``,`` (e.g. ``"mode|message"``). Matching is case-insensitive and
        treats ``-`` like ``_``.

        Args:
            raw (str): The text to parse.

        Returns:
            ThrowFormat: The combined flags.

        Raises:
            ValueError: If the text is empty or contains an unknown token.
        """
        tokens: list[str] = [t.strip() for t in re.split(r"[|,]", raw) if t.strip()]
        if not tokens:
            raise ValueError(f"Empty throw format: {raw!r}")
        result: ThrowFormat = cls(0)
        for token in tokens:
            member: ThrowFormat | None = enum_from_name(
                cls, token.replace("-", "_"), case_insensitive=True
            )
            if member is None:
                raise ValueError(f"Unknown throw format field: {token!r}")
            result |= member
        return result


class Throw:
    """Signal record for one raised condition.

    Built by the raising operations immediately before publish, consumed
    synchronously by the bus subscribers, then inspected once by the raising
    operation. Consumers catch the underlying ``error`` when it propagates;
    the record itself is never attached to it.

    Attributes:
        handled (bool): The only mutable attribute. Its initial value depends on
            the mode (see `throwline.throw.raising`); subscribers flip it during
            publish.
    """

    __slots__ = (
        "_caller",
        "_error",
        "_message",
        "_message_id",
        "_mode",
        "_throw_requested",
        "handled",
    )

    def __init__(
        self,
        error: BaseException,
        message_id: str,
        mode: ThrowMode,
        *,
        message: str | None = None,
        throw_requested: bool | None = None,
        caller: str | None = None,
        handled: bool = False,
    ) -> None:
        self._error: BaseException = error
        self._message_id: str = message_id
        self._mode: ThrowMode = mode
        self._message: str = message if message is not None else _default_message(error)
        self._throw_requested: bool | None = throw_requested
        self._caller: str | None = caller
        self.handled: bool = handled

    @property
    def error(self) -> BaseException:
        """The underlying exception; this is what propagates when the policy raises."""
        return self._error

    @property
    @careful("Pass ids explicitly; do not generate them.")
    def message_id(self) -> str:
        """Identifier for text-searchable correlation (the caller name by default)."""
        return self._message_id

    @property
    def message(self) -> str:
        return self._message

    @property
    def mode(self) -> ThrowMode:
        return self._mode

    @property
    def throw_requested(self) -> bool | None:
        """Explicit raise (``True``) or suppress (``False``) request from the call site."""
        return self._throw_requested

    @property
    def caller(self) -> str | None:
        return self._caller

    @property
    def formatted_message(self) -> str:
        """Return ``"{message_id} | {message}"``."""
        return f"{self._message_id} | {self._message}"

    def render_fields(self, fmt: ThrowFormat = ThrowFormat.BASIC) -> list[str]:
        """Return the rendered fields selected by ``fmt``, in display order.

        Blank ids and messages, never-raised tracebacks and missing inner
        exceptions are skipped rather than rendered empty.

        Args:
            fmt (ThrowFormat): Fields to render.

        Returns:
            list[str]: One string per rendered field.
        """
        fields: list[str] = []
        if ThrowFormat.MODE in fmt:
            fields.append(self._mode.label)
        if ThrowFormat.EXCEPTION_TYPE in fmt:
            fields.append(f"Type: {type(self._error).__name__}")
        if ThrowFormat.MESSAGE_ID in fmt and self._message_id.strip():
            fields.append(f"Id: {self._message_id}")
        if ThrowFormat.MESSAGE in fmt and self._message.strip():
            fields.append(self._message)
        if ThrowFormat.STACK_TRACE in fmt and self._error.__traceback__ is not None:
            fields.append("".join(traceback.format_tb(self._error.__traceback__)).rstrip("\n"))
        if ThrowFormat.INNER_EXCEPTION in fmt:
            inner: BaseException | None = self._error.__cause__ or self._error.__context__
            if inner is not None:
                fields.append(f"Inner: {_default_message(inner)}")
        return fields

    def to_string(self, fmt: ThrowFormat = ThrowFormat.BASIC) -> str:
        """Render the fields selected by ``fmt``, one per line."""
        return "\n".join(self.render_fields(fmt))

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping of this record."""
        return {
            "mode": self._mode.key,
            "error_type": type(self._error).__name__,
            "message_id": self._message_id,
            "message": self._message,
            "handled": self.handled,
            "throw_requested": self._throw_requested,
            "caller": self._caller,
        }

    def __str__(self) -> str:
        return self.formatted_message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(mode={self._mode.key!r}, "
            f"message_id={self._message_id!r}, message={self._message!r}, "
            f"handled={self.handled!r})"
        )


class Advisory(Throw):
    """Informational signal record; its mode is always `ThrowMode.ADVISORY`."""

    __slots__ = ()

    def __init__(
        self,
        error: BaseException,
        message_id: str,
        *,
        message: str | None = None,
        caller: str | None = None,
    ) -> None:
        super().__init__(
            error,
            message_id,
            ThrowMode.ADVISORY,
            message=message,
            throw_requested=None,
            caller=caller,
        )


def _default_message(error: BaseException) -> str:
    """Return ``str(error)``, or the error type name when that is blank."""
    text: str = str(error)
    if text.strip():
        return text
    return type(error).__name__
