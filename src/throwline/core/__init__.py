# topmark:header:start
#
#   project      : ThrowLine
#   file         : __init__.py
#   file_relpath : src/throwline/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Dependency-free helpers shared by the config and throw layers."""
