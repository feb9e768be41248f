# topmark:header:start
#
#   project      : ThrowLine
#   file         : types.py
#   file_relpath : src/throwline/config/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Lightweight config types and aliases.

This module hosts stable, import-friendly definitions that other config modules
can depend on without risk of circular imports.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from throwline.core.enum_mixins import KeyedStrEnum

# TomlTable: plain-dict shape of a parsed TOML table.
TomlTable = dict[str, Any]

# ArgsLike: generic mapping of keyword overrides accepted by the config layer.
ArgsLike = Mapping[str, Any]


class AdvisorySinkKind(KeyedStrEnum):
    """Where unhandled advisories are emitted."""

    LOG = ("log", "Log at DEBUG on the 'throwline.advisory' logger", ("logging", "debug"))
    STREAM = ("stream", "Write one line to STDERR", ("stderr",))
    NONE = ("none", "Discard", ("off", "null"))
