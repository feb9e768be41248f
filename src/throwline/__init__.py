# topmark:header:start
#
#   project      : ThrowLine
#   file         : __init__.py
#   file_relpath : src/throwline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ThrowLine package.

ThrowLine lets a library signal faults and advisories to its consumer through
one observable notification bus. Each signal is published to the bus before
the library decides whether to raise, so the consumer can suppress, escalate,
or log it at the moment it happens.

Example:
    ```python
    import throwline

    def on_throw(sender, throw):
        print(throw.formatted_message)
        throw.handled = True

    with throwline.default_bus().subscribed(on_throw):
        throwline.throw_hard(None, KeyError, "Unknown key")  # printed, not raised
    ```
"""

from __future__ import annotations

from throwline.constants import THROWLINE_VERSION
from throwline.errors import ThrowlineConfigError, ThrowlineError
from throwline.runtime import configure
from throwline.throw import (
    Advisory,
    NotificationBus,
    Throw,
    ThrowableStatus,
    Thrower,
    ThrowFormat,
    ThrowLedger,
    ThrowMode,
    advisory,
    default_bus,
    rethrow_framework,
    rethrow_hard,
    rethrow_soft,
    throw_framework,
    throw_hard,
    throw_soft,
)

__version__: str = THROWLINE_VERSION

__all__ = [
    "Advisory",
    "NotificationBus",
    "Throw",
    "ThrowFormat",
    "ThrowLedger",
    "ThrowMode",
    "ThrowableStatus",
    "Thrower",
    "ThrowlineConfigError",
    "ThrowlineError",
    "advisory",
    "configure",
    "default_bus",
    "rethrow_framework",
    "rethrow_hard",
    "rethrow_soft",
    "throw_framework",
    "throw_hard",
    "throw_soft",
]
