# topmark:header:start
#
#   project      : ThrowLine
#   file         : __init__.py
#   file_relpath : src/throwline/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration and logging for ThrowLine.

Modules:
    - `throwline.config.logging`: TRACE level, `ThrowlineLogger`, colored formatter.
    - `throwline.config.keys`: TOML key names.
    - `throwline.config.loaders`: TOML I/O (tomlkit) and runtime defaults.
    - `throwline.config.model`: `MutableConfig` builder and frozen `Config`.

This package intentionally re-exports nothing: `throwline.config.logging` is
imported by every other module, and keeping this ``__init__`` import-free
avoids cycles with `throwline.throw`.
"""
