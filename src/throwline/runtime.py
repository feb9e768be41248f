# topmark:header:start
#
#   project      : ThrowLine
#   file         : runtime.py
#   file_relpath : src/throwline/runtime.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Runtime helpers that apply configuration to logging and a bus.

`configure` is the one-call entry point for applications: it discovers and
merges config, applies the log level, and installs the configured advisory
sink. Libraries that only raise never need to call it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from throwline.config.logging import get_logger, setup_logging
from throwline.config.model import Config, MutableConfig
from throwline.throw.bus import default_bus, sink_from_config

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from throwline.config.logging import ThrowlineLogger
    from throwline.throw.bus import NotificationBus

logger: ThrowlineLogger = get_logger(__name__)

__all__: list[str] = [
    "configure",
    "ensure_mutable_config",
]


def ensure_mutable_config(
    value: Mapping[str, Any] | MutableConfig | Config | None,
) -> MutableConfig:
    """Return a **MutableConfig** from a mapping or a frozen `Config`.

    Args:
        value (Mapping[str, Any] | MutableConfig | Config | None): Optional mapping
            of overrides, draft, or frozen config instance.

    Returns:
        MutableConfig: A mutable draft configuration.
    """
    if value is None:
        return MutableConfig.from_defaults()
    if isinstance(value, MutableConfig):
        return value
    if isinstance(value, Config):
        return value.thaw()
    return MutableConfig.from_defaults().apply_args(value)


def configure(
    start: Path | None = None,
    *,
    bus: NotificationBus | None = None,
    extra_config_files: Iterable[str | Path] | None = None,
    no_config: bool = False,
    strict: bool = False,
    **overrides: Any,
) -> Config:
    """Load the merged configuration and apply it.

    Logging is set up only when a level is configured (or
    ``THROWLINE_LOG_LEVEL`` is set), so an application's own logging setup is
    left alone otherwise. The advisory sink is replaced on the bus in place;
    its subscribers are kept.

    Args:
        start (Path | None): Config discovery anchor; defaults to the CWD.
        bus (NotificationBus | None): Bus to configure; the default bus when omitted.
        extra_config_files (Iterable[str | Path] | None): Explicit config files to merge.
        no_config (bool): Skip config discovery.
        strict (bool): Raise `ThrowlineConfigError` for unusable explicit config files.
        **overrides (Any): Keyword overrides using the TOML key names.

    Returns:
        Config: The applied configuration.
    """
    draft: MutableConfig = MutableConfig.load_merged(
        start=start,
        extra_config_files=extra_config_files,
        no_config=no_config,
        strict=strict,
    )
    config: Config = draft.apply_args(overrides).freeze()

    level: int | None = config.resolved_log_level()
    if level is not None:
        setup_logging(level)

    target: NotificationBus = bus if bus is not None else default_bus()
    target.advisory_sink = sink_from_config(config)
    logger.debug("Configured %r from %s", target, ", ".join(str(p) for p in config.config_files))
    return config
