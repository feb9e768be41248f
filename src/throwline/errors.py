# topmark:header:start
#
#   project      : ThrowLine
#   file         : errors.py
#   file_relpath : src/throwline/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by ThrowLine itself.

These never wrap the errors signaled through the bus: when the severity policy
decides to raise, the original underlying error propagates unchanged.
"""

from __future__ import annotations


class ThrowlineError(Exception):
    """Base class for all ThrowLine errors."""


class ThrowlineConfigError(ThrowlineError):
    """Error for configuration errors (missing/invalid/malformed config)."""
