# topmark:header:start
#
#   project      : ThrowLine
#   file         : model.py
#   file_relpath : src/throwline/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `Config`: an immutable, runtime snapshot used to build a notification bus.
    - `MutableConfig`: a mutable builder used during discovery/merge; it
      can be frozen into `Config` and thawed back for edits.

Precedence (lowest → highest):
    1. Runtime defaults (`load_defaults_dict`)
    2. Project chain discovered upward from the anchor (root-most → nearest)
    3. Extra config files explicitly provided (in order)
    4. Keyword overrides via `MutableConfig.apply_args`
    5. ``THROWLINE_LOG_LEVEL`` (log level only, see `Config.resolved_log_level`)

Invalid values are reported with a warning and ignored, so a bad config never
prevents the bus from being built. Strict loading only concerns files the
caller named explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from throwline.config.keys import Toml
from throwline.config.loaders import extract_throwline_table, load_defaults_dict, load_toml_dict
from throwline.config.logging import get_logger, parse_log_level, resolve_env_log_level
from throwline.config.types import AdvisorySinkKind
from throwline.errors import ThrowlineConfigError
from throwline.throw.model import ThrowFormat

if TYPE_CHECKING:
    from collections.abc import Iterable

    from throwline.config.logging import ThrowlineLogger
    from throwline.config.types import ArgsLike, TomlTable

logger: ThrowlineLogger = get_logger(__name__)

_KNOWN_KEYS: frozenset[str] = frozenset(
    {
        Toml.KEY_ROOT,
        Toml.KEY_ADVISORY_SINK,
        Toml.KEY_ADVISORY_FORMAT,
        Toml.KEY_COLOR,
        Toml.KEY_LOG_LEVEL,
    }
)


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration for ThrowLine.

    Attributes:
        advisory_sink (AdvisorySinkKind): Where unhandled advisories are emitted.
        advisory_format (ThrowFormat | None): Fields rendered for advisories;
            ``None`` renders ``"{message_id} | {message}"``.
        color (bool): Colorize stream output by mode.
        log_level (str | None): Log level name or number from config.
        config_files (tuple[Path | str, ...]): Config sources merged into this snapshot.
    """

    advisory_sink: AdvisorySinkKind
    advisory_format: ThrowFormat | None
    color: bool
    log_level: str | None
    config_files: tuple[Path | str, ...]

    def resolved_log_level(self) -> int | None:
        """Return the effective log level; ``THROWLINE_LOG_LEVEL`` wins over config."""
        env_level: int | None = resolve_env_log_level()
        if env_level is not None:
            return env_level
        return parse_log_level(self.log_level)

    def to_toml_dict(self) -> TomlTable:
        """Convert this immutable Config into a TOML-serializable dict."""
        toml_dict: TomlTable = {
            Toml.KEY_ADVISORY_SINK: self.advisory_sink.key,
            Toml.KEY_COLOR: self.color,
        }
        if self.advisory_format is not None:
            toml_dict[Toml.KEY_ADVISORY_FORMAT] = _format_to_text(self.advisory_format)
        if self.log_level is not None:
            toml_dict[Toml.KEY_LOG_LEVEL] = self.log_level
        return toml_dict

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this frozen config."""
        return MutableConfig(
            advisory_sink=self.advisory_sink,
            advisory_format=self.advisory_format,
            color=self.color,
            log_level=self.log_level,
            config_files=list(self.config_files),
        )


# -------------------------- Mutable builder --------------------------


@dataclass
class MutableConfig:
    """Mutable configuration used during discovery and merging.

    ``None`` means "not set by this layer"; `merge_with` lets set values of the
    later layer win, and `freeze` fills what is still unset with defaults.
    """

    advisory_sink: AdvisorySinkKind | None = None
    advisory_format: ThrowFormat | None = None
    color: bool | None = None
    log_level: str | None = None
    root: bool = False
    config_files: list[Path | str] = field(default_factory=lambda: [])

    def freeze(self) -> Config:
        """Freeze the draft into an immutable `Config` snapshot."""
        return Config(
            advisory_sink=self.advisory_sink or AdvisorySinkKind.LOG,
            advisory_format=self.advisory_format,
            color=bool(self.color),
            log_level=self.log_level,
            config_files=tuple(self.config_files),
        )

    # --------------------------- Loaders/parsers --------------------------
    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a draft populated with the runtime defaults."""
        draft: MutableConfig = cls.from_toml_dict(load_defaults_dict())
        draft.config_files = ["<defaults>"]
        return draft

    @classmethod
    def from_toml_dict(cls, data: TomlTable, *, source: str = "<dict>") -> MutableConfig:
        """Parse a ThrowLine table into a draft.

        Args:
            data (TomlTable): The ThrowLine table (already extracted from ``pyproject.toml``).
            source (str): Where ``data`` came from, for warnings.

        Returns:
            MutableConfig: The parsed draft; invalid entries are left unset.
        """
        draft = cls()

        for key in data:
            if key not in _KNOWN_KEYS:
                logger.warning("Unknown key %r in %s (ignored)", key, source)

        sink_raw: Any = data.get(Toml.KEY_ADVISORY_SINK)
        if sink_raw is not None:
            sink: AdvisorySinkKind | None = (
                AdvisorySinkKind.parse(sink_raw) if isinstance(sink_raw, str) else None
            )
            if sink is None:
                logger.warning(
                    "Invalid %s %r in %s (expected one of: %s)",
                    Toml.KEY_ADVISORY_SINK,
                    sink_raw,
                    source,
                    ", ".join(k.key for k in AdvisorySinkKind),
                )
            draft.advisory_sink = sink

        fmt_raw: Any = data.get(Toml.KEY_ADVISORY_FORMAT)
        if fmt_raw is not None:
            if isinstance(fmt_raw, str):
                try:
                    draft.advisory_format = ThrowFormat.parse(fmt_raw)
                except ValueError as e:
                    logger.warning("Invalid %s in %s: %s", Toml.KEY_ADVISORY_FORMAT, source, e)
            else:
                logger.warning("Invalid %s %r in %s", Toml.KEY_ADVISORY_FORMAT, fmt_raw, source)

        color_raw: Any = data.get(Toml.KEY_COLOR)
        if color_raw is not None:
            if isinstance(color_raw, bool):
                draft.color = color_raw
            else:
                logger.warning(
                    "Invalid %s %r in %s (expected a boolean)", Toml.KEY_COLOR, color_raw, source
                )

        level_raw: Any = data.get(Toml.KEY_LOG_LEVEL)
        if level_raw is not None:
            level_text: str = str(level_raw)
            if parse_log_level(level_text) is None:
                logger.warning("Invalid %s %r in %s", Toml.KEY_LOG_LEVEL, level_raw, source)
            else:
                draft.log_level = level_text

        root_raw: Any = data.get(Toml.KEY_ROOT)
        if root_raw is not None:
            if isinstance(root_raw, bool):
                draft.root = root_raw
            else:
                logger.warning(
                    "Invalid %s %r in %s (expected a boolean)", Toml.KEY_ROOT, root_raw, source
                )
        return draft

    @classmethod
    def from_toml_file(cls, path: Path, *, strict: bool = False) -> MutableConfig | None:
        """Load configuration from a single TOML file.

        Supports both ``throwline.toml`` and ``pyproject.toml`` files,
        extracting the ``[tool.throwline]`` section from the latter.

        Args:
            path (Path): Path to the TOML file.
            strict (bool): Raise instead of returning ``None`` when the file is
                unreadable, unparsable, or lacks a ThrowLine section.

        Returns:
            MutableConfig | None: The draft if successful; None if the section is missing.

        Raises:
            ThrowlineConfigError: In strict mode, if the file cannot be used.
        """
        logger.debug("Creating MutableConfig from TOML config: %s", path)

        data: TomlTable = load_toml_dict(path, strict=strict)
        table: TomlTable | None = extract_throwline_table(data, path)
        if table is None:
            if strict:
                raise ThrowlineConfigError(f"[tool.throwline] section missing in {path}")
            logger.debug("No [tool.throwline] section in %s", path)
            return None

        draft: MutableConfig = cls.from_toml_dict(table, source=str(path))
        draft.config_files = [path]
        logger.debug("Generated MutableConfig: %s", draft)
        return draft

    @classmethod
    def discover_local_config_files(cls, start: Path) -> list[Path]:
        """Return config files discovered by walking upward from ``start``.

        In a given directory both ``pyproject.toml`` and ``throwline.toml`` are
        considered, ``pyproject.toml`` first so that ``throwline.toml`` wins a
        later merge. A config with ``root = true`` stops the walk after its
        directory.

        Args:
            start (Path): The Path instance where discovery starts.

        Returns:
            list[Path]: Discovered config file paths, root-most first, nearest last.
        """
        found_per_dir: list[list[Path]] = []
        cur: Path = start.resolve()
        if cur.is_file():
            cur = cur.parent

        while True:
            here: list[Path] = []
            stop_here = False
            for name in (Toml.PYPROJECT_FILE, Toml.THROWLINE_FILE):
                p: Path = cur / name
                if not p.is_file():
                    continue
                table: TomlTable | None = extract_throwline_table(load_toml_dict(p), p)
                if table is None:
                    continue
                here.append(p)
                logger.debug("Discovered config file: %s", p)
                if table.get(Toml.KEY_ROOT) is True:
                    stop_here = True
            if here:
                found_per_dir.append(here)

            parent: Path = cur.parent
            if parent == cur or stop_here:
                break
            cur = parent

        return [p for here in reversed(found_per_dir) for p in here]

    @classmethod
    def load_merged(
        cls,
        *,
        start: Path | None = None,
        extra_config_files: Iterable[str | Path] | None = None,
        no_config: bool = False,
        strict: bool = False,
    ) -> MutableConfig:
        """Load a layered configuration with clear precedence.

        Args:
            start (Path | None): Discovery anchor; defaults to the CWD.
            extra_config_files (Iterable[str | Path] | None): Explicit config files to
                merge after discovery.
            no_config (bool): If True, skip project discovery.
            strict (bool): Raise `ThrowlineConfigError` if an extra config file is
                missing or unusable.

        Returns:
            MutableConfig: A merged draft that callers can further override then freeze.

        Raises:
            ThrowlineConfigError: In strict mode, for an unusable extra config file.
        """
        draft: MutableConfig = cls.from_defaults()

        if not no_config:
            anchor: Path = start if start is not None else Path.cwd()
            for cfg_path in cls.discover_local_config_files(anchor):
                maybe: MutableConfig | None = cls.from_toml_file(cfg_path)
                if maybe is not None:
                    draft = draft.merge_with(maybe)

        for entry in extra_config_files or ():
            p: Path = entry if isinstance(entry, Path) else Path(entry)
            if not p.is_file():
                if strict:
                    raise ThrowlineConfigError(f"Config file not found: {p}")
                logger.warning("Config file not found: %s", p)
                continue
            maybe = cls.from_toml_file(p, strict=strict)
            if maybe is not None:
                draft = draft.merge_with(maybe)

        return draft

    # ------------------------------- Merging -------------------------------
    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft where values set in ``other`` override this draft."""
        return MutableConfig(
            advisory_sink=other.advisory_sink
            if other.advisory_sink is not None
            else self.advisory_sink,
            advisory_format=other.advisory_format
            if other.advisory_format is not None
            else self.advisory_format,
            color=other.color if other.color is not None else self.color,
            log_level=other.log_level if other.log_level is not None else self.log_level,
            root=other.root or self.root,
            config_files=self.config_files + other.config_files,
        )

    def apply_args(self, args: ArgsLike) -> MutableConfig:
        """Apply keyword overrides (API or tests) in place.

        Keys match the TOML keys. Values may be given as the typed value
        (`AdvisorySinkKind`, `ThrowFormat`) or as the TOML text form.

        Args:
            args (ArgsLike): Override mapping; ``None`` values are ignored.

        Returns:
            MutableConfig: ``self``, for chaining.
        """
        sink: Any = args.get(Toml.KEY_ADVISORY_SINK)
        fmt: Any = args.get(Toml.KEY_ADVISORY_FORMAT)
        overrides: TomlTable = {
            k: v
            for k, v in args.items()
            if v is not None and k not in (Toml.KEY_ADVISORY_SINK, Toml.KEY_ADVISORY_FORMAT)
        }
        if isinstance(sink, AdvisorySinkKind):
            self.advisory_sink = sink
        elif sink is not None:
            overrides[Toml.KEY_ADVISORY_SINK] = sink
        if isinstance(fmt, ThrowFormat):
            self.advisory_format = fmt
        elif fmt is not None:
            overrides[Toml.KEY_ADVISORY_FORMAT] = fmt

        if overrides:
            parsed: MutableConfig = MutableConfig.from_toml_dict(overrides, source="<overrides>")
            merged: MutableConfig = self.merge_with(parsed)
            self.advisory_sink = merged.advisory_sink
            self.advisory_format = merged.advisory_format
            self.color = merged.color
            self.log_level = merged.log_level
        return self


def _format_to_text(fmt: ThrowFormat) -> str:
    """Render a `ThrowFormat` as TOML text (a preset name when one matches)."""
    for preset in (ThrowFormat.BASIC, ThrowFormat.TEST, ThrowFormat.FORENSIC):
        if fmt == preset:
            return str(preset.name).lower()
    return "|".join(str(m.name).lower() for m in ThrowFormat if m in fmt and _is_single_bit(m))


def _is_single_bit(member: ThrowFormat) -> bool:
    value: int = member.value
    return value != 0 and value & (value - 1) == 0
