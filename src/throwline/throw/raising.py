# topmark:header:start
#
#   project      : ThrowLine
#   file         : raising.py
#   file_relpath : src/throwline/throw/raising.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Raising operations and the severity policy.

Every operation builds a `Throw`, publishes it once on a `NotificationBus`,
re-reads ``handled`` and then either returns the record or raises the
underlying error itself. Nothing else can happen.

Severity policy:

    | Mode      | ``handled`` before publish | After publish                               |
    |-----------|----------------------------|---------------------------------------------|
    | HARD      | ``False``                  | raise unless handled or ``throw is False``  |
    | SOFT      | ``throw is not True``      | raise iff not handled                       |
    | FRAMEWORK | ``throw is False``         | raise iff not handled                       |
    | ADVISORY  | ``False``                  | never raise; unhandled goes to the sink     |

So with nobody subscribed, HARD and FRAMEWORK raise, SOFT stays quiet and
ADVISORY reaches the advisory sink. A subscriber suppresses by setting
``handled = True`` and escalates a SOFT signal by setting ``handled = False``.
``throw=False`` at a HARD call site always suppresses.

Identifier resolution:
    With one free-text argument (``message_or_id``) it is the message and the
    caller's function name is the id. With two, the first is the id and the
    second the message. A blank ``message_or_id`` becomes the error type name.

Example:
    ```python
    throw_hard(self, KeyError, "Unknown key")           # id = calling function
    throw_hard(self, KeyError, "251019.A", "Unknown key")
    throw_soft(self, TimeoutError, throw=True)          # raise unless handled
    advisory(self, "Falling back to defaults")
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from throwline.config.logging import get_logger
from throwline.core.introspection import caller_name
from throwline.throw.annotations import canonical
from throwline.throw.bus import default_bus
from throwline.throw.model import Advisory, Throw, ThrowMode

if TYPE_CHECKING:
    from throwline.config.logging import ThrowlineLogger
    from throwline.throw.bus import NotificationBus

# ErrorFactory: builds the underlying error from the resolved message; exception classes qualify.
ErrorFactory = Callable[[str], BaseException]

logger: ThrowlineLogger = get_logger(__name__)


# ------------------------------ Policy ------------------------------


def initial_handled(mode: ThrowMode, throw: bool | None) -> bool:
    """Return the ``handled`` value a record of ``mode`` starts with before publish."""
    if mode is ThrowMode.SOFT:
        return throw is not True
    if mode is ThrowMode.FRAMEWORK:
        return throw is False
    return False


@canonical("Single decision point shared by every raising operation")
def should_raise(throw: Throw) -> bool:
    """Return True if the record's underlying error must propagate after publish."""
    if throw.mode is ThrowMode.ADVISORY:
        return False
    if throw.mode is ThrowMode.HARD:
        return not throw.handled and throw.throw_requested is not False
    return not throw.handled


# ------------------------------ Helpers ------------------------------


def error_type_name(error_type: Any) -> str:
    """Return a display name for an error class or factory."""
    name: Any = getattr(error_type, "__name__", None)
    return name if isinstance(name, str) and name else type(error_type).__name__


def build_error(error_type: ErrorFactory, message: str) -> BaseException:
    """Construct the underlying error, falling back to ``Exception(message)``.

    Construction never fails the raising operation: if ``error_type`` raises,
    or returns something that is not an exception, a plain `Exception`
    carrying ``message`` is used instead.

    Args:
        error_type (ErrorFactory): Exception class or factory taking the message.
        message (str): The resolved message.

    Returns:
        BaseException: The constructed error.
    """
    try:
        error: Any = error_type(message)
    except Exception as e:  # noqa: BLE001 - any construction failure falls back
        logger.debug("Cannot construct %s(%r): %s", error_type_name(error_type), message, e)
        return Exception(message)
    if not isinstance(error, BaseException):
        logger.debug("%s did not return an exception (%r)", error_type_name(error_type), error)
        return Exception(message)
    return error


def resolve_id_and_message(
    default_text: str,
    message_or_id: str | None,
    message_only: str | None,
    caller: str,
) -> tuple[str, str]:
    """Resolve ``(message_id, message)`` from the free-text arguments.

    Args:
        default_text (str): Replaces a blank ``message_or_id`` (the error type name).
        message_or_id (str | None): The message, or the id when ``message_only`` is given.
        message_only (str | None): The message, when an explicit id is given.
        caller (str): The captured caller name.

    Returns:
        tuple[str, str]: The id and the message.
    """
    if message_or_id is None or not message_or_id.strip():
        message_or_id = default_text
    if message_only is None:
        return caller, message_or_id
    return message_or_id, message_only


def _signal(sender: Any, throw: Throw, bus: NotificationBus | None) -> Throw:
    """Publish ``throw`` and apply the severity policy."""
    target: NotificationBus = bus if bus is not None else default_bus()
    target.publish(sender, throw)

    if should_raise(throw):
        logger.debug(
            "Raising %s from %s (%s): %s",
            type(throw.error).__name__,
            throw.caller,
            throw.mode.key,
            throw.message,
        )
        raise throw.error

    if throw.mode is ThrowMode.ADVISORY and not throw.handled:
        try:
            target.advisory_sink(throw)
        except Exception as e:  # noqa: BLE001 - advisories never disrupt control flow
            logger.warning("Advisory sink failed for %r: %s", throw.message_id, e)
    else:
        logger.trace(
            "Not raising %s (%s, handled=%s)", throw.message_id, throw.mode.key, throw.handled
        )
    return throw


def _throw_new(
    mode: ThrowMode,
    sender: Any,
    error_type: ErrorFactory,
    message_or_id: str | None,
    message_only: str | None,
    throw: bool | None,
    caller: str,
    bus: NotificationBus | None,
) -> Throw:
    message_id, message = resolve_id_and_message(
        error_type_name(error_type), message_or_id, message_only, caller
    )
    record = Throw(
        build_error(error_type, message),
        message_id,
        mode,
        message=message,
        throw_requested=throw,
        caller=caller,
        handled=initial_handled(mode, throw),
    )
    return _signal(sender, record, bus)


def _throw_existing(
    mode: ThrowMode,
    sender: Any,
    error: BaseException,
    message_or_id: str | None,
    message_only: str | None,
    throw: bool | None,
    caller: str,
    bus: NotificationBus | None,
) -> Throw:
    message_id: str
    message: str | None
    if message_only is None and (message_or_id is None or not message_or_id.strip()):
        # Nothing to override: keep the error's own text.
        message_id, message = caller, None
    else:
        message_id, message = resolve_id_and_message(
            type(error).__name__, message_or_id, message_only, caller
        )
    record = Throw(
        error,
        message_id,
        mode,
        message=message,
        throw_requested=throw,
        caller=caller,
        handled=initial_handled(mode, throw),
    )
    return _signal(sender, record, bus)


# ------------------------------ Hard ------------------------------


def throw_hard(
    sender: Any,
    error_type: ErrorFactory = Exception,
    message_or_id: str | None = None,
    message_only: str | None = None,
    *,
    throw: bool | None = None,
    caller: str | None = None,
    bus: NotificationBus | None = None,
) -> Throw:
    """Signal a condition the library does not expect to recover from.

    Raises the new error unless a subscriber handles it or ``throw=False``.

    Args:
        sender (Any): The object raising; passed to subscribers.
        error_type (ErrorFactory): Exception class or factory for the underlying error.
        message_or_id (str | None): Message, or id when ``message_only`` is given.
        message_only (str | None): Message when an explicit id is given.
        throw (bool | None): ``False`` suppresses regardless of subscribers.
        caller (str | None): Caller identity; captured from the call site when omitted.
        bus (NotificationBus | None): Bus to publish on; the default bus when omitted.

    Returns:
        Throw: The record, when control flow is not interrupted.
    """
    return _throw_new(
        ThrowMode.HARD,
        sender,
        error_type,
        message_or_id,
        message_only,
        throw,
        caller or caller_name(),
        bus,
    )


def rethrow_hard(
    sender: Any,
    error: BaseException,
    message_or_id: str | None = None,
    message_only: str | None = None,
    *,
    throw: bool | None = None,
    caller: str | None = None,
    bus: NotificationBus | None = None,
) -> Throw:
    """Signal an existing error as a hard fault; see `throw_hard`."""
    return _throw_existing(
        ThrowMode.HARD,
        sender,
        error,
        message_or_id,
        message_only,
        throw,
        caller or caller_name(),
        bus,
    )


# ------------------------------ Soft ------------------------------


def throw_soft(
    sender: Any,
    error_type: ErrorFactory = Exception,
    message_or_id: str | None = None,
    message_only: str | None = None,
    *,
    throw: bool | None = None,
    caller: str | None = None,
    bus: NotificationBus | None = None,
) -> Throw:
    """Signal a recoverable condition.

    The record starts handled, so the error only propagates when a subscriber
    sets ``handled = False``. ``throw=True`` starts it unhandled instead, which
    makes it raise unless a subscriber handles it.

    Returns:
        Throw: The record, when control flow is not interrupted.
    """
    return _throw_new(
        ThrowMode.SOFT,
        sender,
        error_type,
        message_or_id,
        message_only,
        throw,
        caller or caller_name(),
        bus,
    )


def rethrow_soft(
    sender: Any,
    error: BaseException,
    message_or_id: str | None = None,
    message_only: str | None = None,
    *,
    throw: bool | None = None,
    caller: str | None = None,
    bus: NotificationBus | None = None,
) -> Throw:
    """Signal an existing error as a soft condition; see `throw_soft`."""
    return _throw_existing(
        ThrowMode.SOFT,
        sender,
        error,
        message_or_id,
        message_only,
        throw,
        caller or caller_name(),
        bus,
    )


# ------------------------------ Framework ------------------------------


def throw_framework(
    sender: Any,
    error_type: ErrorFactory = Exception,
    message_or_id: str | None = None,
    message_only: str | None = None,
    *,
    throw: bool | None = None,
    caller: str | None = None,
    bus: NotificationBus | None = None,
) -> Throw:
    """Signal an internal inconsistency that is not the consumer's fault.

    Raises by default. ``throw=False`` downgrades it to handled; a subscriber
    can also handle it.

    Returns:
        Throw: The record, when control flow is not interrupted.
    """
    return _throw_new(
        ThrowMode.FRAMEWORK,
        sender,
        error_type,
        message_or_id,
        message_only,
        throw,
        caller or caller_name(),
        bus,
    )


def rethrow_framework(
    sender: Any,
    error: BaseException,
    message_or_id: str | None = None,
    message_only: str | None = None,
    *,
    throw: bool | None = None,
    caller: str | None = None,
    bus: NotificationBus | None = None,
) -> Throw:
    """Signal an existing error as a framework fault; see `throw_framework`."""
    return _throw_existing(
        ThrowMode.FRAMEWORK,
        sender,
        error,
        message_or_id,
        message_only,
        throw,
        caller or caller_name(),
        bus,
    )


# ------------------------------ Advisory ------------------------------


def advisory(
    sender: Any,
    message_or_id: str,
    message_only: str | None = None,
    *,
    caller: str | None = None,
    bus: NotificationBus | None = None,
) -> Advisory:
    """Publish an informational signal that never disrupts control flow.

    When no subscriber handles it, the bus's advisory sink receives it.

    Returns:
        Advisory: The record.
    """
    resolved_caller: str = caller or caller_name()
    message_id, message = resolve_id_and_message(
        message_or_id, message_or_id, message_only, resolved_caller
    )
    record = Advisory(Exception(message), message_id, message=message, caller=resolved_caller)
    _signal(sender, record, bus)
    return record


# ------------------------------ Mixin ------------------------------


class Thrower:
    """Mixin exposing the raising operations as methods.

    Records are published on ``throw_bus`` when set, otherwise on the default
    bus. The caller identity is the function that called the method.
    """

    throw_bus: NotificationBus | None = None

    def throw_hard(
        self,
        error_type: ErrorFactory = Exception,
        message_or_id: str | None = None,
        message_only: str | None = None,
        *,
        throw: bool | None = None,
        caller: str | None = None,
    ) -> Throw:
        """See `throwline.throw.raising.throw_hard`."""
        return throw_hard(
            self,
            error_type,
            message_or_id,
            message_only,
            throw=throw,
            caller=caller or caller_name(),
            bus=self.throw_bus,
        )

    def rethrow_hard(
        self,
        error: BaseException,
        message_or_id: str | None = None,
        message_only: str | None = None,
        *,
        throw: bool | None = None,
        caller: str | None = None,
    ) -> Throw:
        """See `throwline.throw.raising.rethrow_hard`."""
        return rethrow_hard(
            self,
            error,
            message_or_id,
            message_only,
            throw=throw,
            caller=caller or caller_name(),
            bus=self.throw_bus,
        )

    def throw_soft(
        self,
        error_type: ErrorFactory = Exception,
        message_or_id: str | None = None,
        message_only: str | None = None,
        *,
        throw: bool | None = None,
        caller: str | None = None,
    ) -> Throw:
        """See `throwline.throw.raising.throw_soft`."""
        return throw_soft(
            self,
            error_type,
            message_or_id,
            message_only,
            throw=throw,
            caller=caller or caller_name(),
            bus=self.throw_bus,
        )

    def rethrow_soft(
        self,
        error: BaseException,
        message_or_id: str | None = None,
        message_only: str | None = None,
        *,
        throw: bool | None = None,
        caller: str | None = None,
    ) -> Throw:
        """See `throwline.throw.raising.rethrow_soft`."""
        return rethrow_soft(
            self,
            error,
            message_or_id,
            message_only,
            throw=throw,
            caller=caller or caller_name(),
            bus=self.throw_bus,
        )

    def throw_framework(
        self,
        error_type: ErrorFactory = Exception,
        message_or_id: str | None = None,
        message_only: str | None = None,
        *,
        throw: bool | None = None,
        caller: str | None = None,
    ) -> Throw:
        """See `throwline.throw.raising.throw_framework`."""
        return throw_framework(
            self,
            error_type,
            message_or_id,
            message_only,
            throw=throw,
            caller=caller or caller_name(),
            bus=self.throw_bus,
        )

    def rethrow_framework(
        self,
        error: BaseException,
        message_or_id: str | None = None,
        message_only: str | None = None,
        *,
        throw: bool | None = None,
        caller: str | None = None,
    ) -> Throw:
        """See `throwline.throw.raising.rethrow_framework`."""
        return rethrow_framework(
            self,
            error,
            message_or_id,
            message_only,
            throw=throw,
            caller=caller or caller_name(),
            bus=self.throw_bus,
        )

    def advisory(
        self,
        message_or_id: str,
        message_only: str | None = None,
        *,
        caller: str | None = None,
    ) -> Advisory:
        """See `throwline.throw.raising.advisory`."""
        return advisory(
            self,
            message_or_id,
            message_only,
            caller=caller or caller_name(),
            bus=self.throw_bus,
        )
