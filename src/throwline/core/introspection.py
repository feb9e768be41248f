# topmark:header:start
#
#   project      : ThrowLine
#   file         : introspection.py
#   file_relpath : src/throwline/core/introspection.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Call-site and callable introspection helpers.

`caller_name` captures the name of the function that invoked a raising
operation, which becomes the default message id of a signal record.
`format_callable_pretty` renders subscribers in log output.
"""

from __future__ import annotations

import sys
from inspect import getmodule
from typing import Any, Final

UNKNOWN_CALLER: Final[str] = "<unknown>"


def caller_name(stacklevel: int = 1) -> str:
    """Return the function name ``stacklevel`` frames above the calling function.

    With the default ``stacklevel=1``, a function ``f`` that calls
    ``caller_name()`` receives the name of the function that called ``f``.

    Args:
        stacklevel (int): How many frames to walk up from the function calling this helper.

    Returns:
        str: The code object name of that frame (``"<module>"`` at module level), or
        ``"<unknown>"`` when the stack is not deep enough.
    """
    try:
        frame = sys._getframe(stacklevel + 1)  # pyright: ignore[reportPrivateUsage]
    except ValueError:
        return UNKNOWN_CALLER
    try:
        return frame.f_code.co_name
    finally:
        del frame


def format_callable_pretty(obj: Any) -> str:
    """Return a human-friendly (module.qualname) for any callable.

    Handles functions, bound methods, callable instances, and partials. Falls
    back to the callable's class name when needed, and uses ``inspect.getmodule``
    as a last resort to resolve the module name.

    Args:
        obj: The callable object to describe.

    Returns:
        A string like ``"(package.module.QualifiedName)"`` or ``"(QualifiedName)"``
        if the module cannot be resolved.
    """
    mod_name: str | None = getattr(obj, "__module__", None)
    call_name: str | None = getattr(obj, "__qualname__", None)

    if call_name is None:
        call_name = getattr(obj, "__name__", None)
    if call_name is None:
        call_name = type(obj).__name__

    if not mod_name:
        mod = getmodule(obj)
        if mod is not None and getattr(mod, "__name__", None):
            mod_name = mod.__name__

    return f"({mod_name}.{call_name})" if mod_name else f"({call_name})"
