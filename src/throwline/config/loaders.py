# topmark:header:start
#
#   project      : ThrowLine
#   file         : loaders.py
#   file_relpath : src/throwline/config/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load TOML configuration sources.

This module provides I/O helpers for reading ThrowLine configuration from
on-disk TOML files (`throwline.toml` / `pyproject.toml`), plus the runtime
defaults that form the base layer of every merge.

Parsing is done with `tomlkit` and returned as plain `dict` structures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from throwline.config.keys import Toml
from throwline.config.logging import get_logger
from throwline.errors import ThrowlineConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from throwline.config.logging import ThrowlineLogger
    from throwline.config.types import TomlTable

logger: ThrowlineLogger = get_logger(__name__)


def load_defaults_dict() -> TomlTable:
    """Return ThrowLine's **runtime defaults** as a Python dict.

    This function intentionally performs **no I/O**.

    Returns:
        A TOML-table-compatible dict containing the runtime defaults.

    Notes:
        The returned value is a new dict so callers can mutate it safely.
    """
    return {
        Toml.KEY_ADVISORY_SINK: "log",
        Toml.KEY_COLOR: False,
        # NOTE: advisory_format and log_level default to unset.
    }


def load_toml_dict(path: Path, *, strict: bool = False) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path: Path to a TOML document (e.g., ``throwline.toml`` or ``pyproject.toml``).
        strict: If True, raise instead of logging and returning an empty dict.

    Returns:
        The parsed TOML content.

    Raises:
        ThrowlineConfigError: In strict mode, if the file cannot be read or parsed.

    Notes:
        - Encoding is assumed to be UTF-8.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
        data_any: Any = doc.unwrap()
        return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}
    except OSError as e:
        if strict:
            raise ThrowlineConfigError(f"Cannot read config file {path}: {e}") from e
        logger.error("Error loading TOML from %s: %s", path, e)
        return {}
    except TomlkitParseError as e:
        if strict:
            raise ThrowlineConfigError(f"Cannot parse config file {path}: {e}") from e
        logger.error("Error decoding TOML from %s: %s", path, e)
        return {}


def extract_throwline_table(data: TomlTable, path: Path) -> TomlTable | None:
    """Return the ThrowLine table of a parsed config file.

    For ``pyproject.toml`` this is ``[tool.throwline]``; for any other file the
    whole document is the ThrowLine table.

    Args:
        data: The parsed TOML document.
        path: Where ``data`` came from (only its name is inspected).

    Returns:
        The ThrowLine table, or ``None`` if a ``pyproject.toml`` has no
        ``[tool.throwline]`` table.
    """
    if path.name != Toml.PYPROJECT_FILE:
        return data
    tool: Any = data.get(Toml.SECTION_TOOL, {})
    section: Any = tool.get(Toml.SECTION_THROWLINE) if isinstance(tool, dict) else None
    if not isinstance(section, dict):
        return None
    return cast("TomlTable", section)
