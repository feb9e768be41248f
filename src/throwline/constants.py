# topmark:header:start
#
#   project      : ThrowLine
#   file         : constants.py
#   file_relpath : src/throwline/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ThrowLine Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

THROWLINE_VERSION: str = get_version("throwline")
