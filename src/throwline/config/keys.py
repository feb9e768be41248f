# topmark:header:start
#
#   project      : ThrowLine
#   file         : keys.py
#   file_relpath : src/throwline/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML file, table and key names for ThrowLine configuration.

Keys defined here represent *external configuration API*
(``throwline.toml`` and ``[tool.throwline]`` in ``pyproject.toml``).
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML names used by ThrowLine configuration."""

    # Files
    PYPROJECT_FILE: Final[str] = "pyproject.toml"
    THROWLINE_FILE: Final[str] = "throwline.toml"

    # [tool.throwline] inside pyproject.toml
    SECTION_TOOL: Final[str] = "tool"
    SECTION_THROWLINE: Final[str] = "throwline"

    # Discovery
    KEY_ROOT: Final[str] = "root"

    # Advisory routing
    KEY_ADVISORY_SINK: Final[str] = "advisory_sink"
    KEY_ADVISORY_FORMAT: Final[str] = "advisory_format"
    KEY_COLOR: Final[str] = "color"

    # Logging
    KEY_LOG_LEVEL: Final[str] = "log_level"
