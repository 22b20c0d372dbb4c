"""Configuration loading and management."""

from __future__ import annotations

import codecs
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from .constants import DEFAULT_ENCODING, DEFAULT_MAX_FILE_SIZE

OUTPUT_MODES = ("debug", "html", "toc")

# Input is split on b"\n" before decoding, and prefixes are matched as ASCII
ASCII_SAMPLE = "\n#=>*`\t "


@dataclass
class GemtextConfig:
    """Configuration for parsing and rendering gemtext documents.

    Attributes:
        mode: Output produced by the command line tool (``"debug"``,
            ``"html"`` or ``"toc"``).
        encoding: Character encoding of the input.
        indent_chars: Characters used to indent nested outline entries.
        indent_spaces: Number of spaces used for indentation; overrides
            `indent_chars` when set.
        html_toc: Whether HTML output starts with a navigation outline.
        preserve_unicode: Whether to keep Unicode characters in heading anchors.
        max_file_size: Maximum input file size in bytes.

    Examples:
        GemtextConfig(mode="html", html_toc=False)
    """

    mode: str = "debug"
    encoding: str = DEFAULT_ENCODING

    # Formatting
    indent_chars: str = "    "
    indent_spaces: int | None = None
    html_toc: bool = True
    preserve_unicode: bool = False

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`mode` must be one of: debug, html, toc")
    """


def load_config(search_path: Path) -> GemtextConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.gemtext]`` table from `pyproject.toml` and the ``[gemtext]`` or
    ``[tool.gemtext]`` table from `.gemtext.toml` when present. TOML files that
    cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        GemtextConfig: Loaded configuration, or the defaults when no
            configuration is found.

    Raises:
        ConfigError: If a matching table is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("capsule"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "gemtext")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".gemtext.toml",
            table_paths=[("gemtext",), ("tool", "gemtext")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return GemtextConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> GemtextConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> GemtextConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    # TOML keys are commonly written with dashes
    options = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return GemtextConfig(**options)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: GemtextConfig) -> GemtextConfig:
    """Resolve `indent_spaces` into `indent_chars` and lowercase the mode."""
    indent_chars = config.indent_chars
    if config.indent_spaces is not None:
        _ensure_integers({"indent_spaces": config.indent_spaces})
        if config.indent_spaces <= 0:
            raise ConfigError("`indent_spaces` must be a positive integer")
        indent_chars = " " * config.indent_spaces

    mode = config.mode.lower() if isinstance(config.mode, str) else config.mode

    return replace(config, indent_chars=indent_chars, mode=mode)


def validate_config(config: GemtextConfig) -> None:
    """Validate a `GemtextConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the mode is unknown, the encoding is unknown or not
            ASCII-compatible, the indentation is empty, a flag is not a
            boolean, or the size limit is not a positive integer.

    Examples:
        validate_config(GemtextConfig(mode="toc"))
    """
    config = normalize_config(config)

    _ensure_integers({"max_file_size": config.max_file_size})
    if config.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")

    if config.mode not in OUTPUT_MODES:
        raise ConfigError(f"`mode` must be one of: {', '.join(OUTPUT_MODES)}")

    if not isinstance(config.encoding, str) or not config.encoding:
        raise ConfigError("`encoding` must not be empty")
    try:
        codecs.lookup(config.encoding)
    except LookupError as error:
        raise ConfigError(f"Unknown `encoding`: {config.encoding}") from error
    try:
        ascii_compatible = ASCII_SAMPLE.encode(config.encoding) == ASCII_SAMPLE.encode("ascii")
    except (LookupError, UnicodeError):
        ascii_compatible = False
    if not ascii_compatible:
        raise ConfigError("`encoding` must be ASCII-compatible")

    if not config.indent_chars:
        raise ConfigError("`indent_chars` must not be empty")
    if not isinstance(config.html_toc, bool):
        raise ConfigError("`html_toc` must be a boolean")
    if not isinstance(config.preserve_unicode, bool):
        raise ConfigError("`preserve_unicode` must be a boolean")


def apply_overrides(config: GemtextConfig, **overrides: object) -> GemtextConfig:
    """Apply override values to a `GemtextConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set
            to None are ignored.

    Returns:
        GemtextConfig: New configuration with the overrides applied, or the
            original configuration when nothing changes.

    Raises:
        TypeError: If an override name is not defined on `GemtextConfig`.

    Examples:
        updated = apply_overrides(config, mode="html", html_toc=False)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "indent_chars" in changes and "indent_spaces" not in changes:
        changes["indent_spaces"] = None
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> GemtextConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None
            values are ignored.

    Returns:
        GemtextConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), mode="html")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
