"""Filesystem helpers for gemtext."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

from .constants import DEFAULT_MAX_FILE_SIZE, GEMTEXT_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "GEMTEXT_MAX_FILE_SIZE"
NEW_FILE_PERMISSIONS = 0o644


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed input file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["GEMTEXT_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def normalize_filepath(raw_path: str) -> Path:
    """Resolve and validate the path of a gemtext document.

    Args:
        raw_path: User-supplied path (absolute, relative, or starting with ``~``).

    Returns:
        Path: Absolute path to the document.

    Raises:
        ValueError: If the path does not exist, is not a regular file, or uses
            an unsupported extension.

    Examples:
        normalize_filepath("capsule/index.gmi")
    """
    path = Path(raw_path).expanduser()

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    if resolved.suffix.lower() not in GEMTEXT_EXTENSIONS:
        error_message = f"{resolved} is not a gemtext file.\n"
        error_message += f"Supported extensions are: {', '.join(GEMTEXT_EXTENSIONS)}"
        raise ValueError(error_message)

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a regular file.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata.

    Raises:
        IOError: If the path is inaccessible or not a regular file.
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.

    Examples:
        enforce_file_size(os.stat("index.gmi"), 102400, Path("index.gmi"))
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def read_limited(stream: BinaryIO, max_size: int, name: str) -> bytes:
    """Read a whole binary stream, refusing more than `max_size` bytes.

    Used for input without a file to stat, such as standard input.

    Args:
        stream: Binary stream to read.
        max_size: Maximum allowed size in bytes.
        name: Name of the stream used in error messages.

    Returns:
        bytes: The stream content.

    Raises:
        IOError: If the stream holds more than `max_size` bytes.

    Examples:
        content = read_limited(sys.stdin.buffer, 102400, "<stdin>")
    """
    content = stream.read(max_size + 1)
    if len(content) > max_size:
        error_message = f"{name} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)
    return content


def safe_read(filepath: Path) -> BinaryIO:
    """Open a file for binary reading with consistent error handling.

    The parser decodes lines itself, so only ``\\n`` separates lines.

    Args:
        filepath: Path to the file.

    Returns:
        BinaryIO: File handle opened for reading.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("index.gmi")) as handle:
            first_line = handle.readline()
    """
    try:
        return open(filepath, "rb")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def write_output(
    filepath: Path,
    content: str,
    encoding: str = "UTF-8",
    warn: Callable[[str], None] | None = None,
):
    """Write rendered output atomically.

    The content goes to a temporary file in the target directory which then
    replaces the target. An existing target keeps its permissions and, when
    the platform and privileges allow it, its ownership.

    Args:
        filepath: Destination path.
        content: Text to write.
        encoding: Encoding of the written text.
        warn: Optional callback for non-fatal warnings.

    Returns:
        None.

    Raises:
        IOError: If the destination is a symlink, is not a regular file, or
            cannot be written.

    Examples:
        write_output(Path("index.html"), "".join(lines))
    """
    if filepath.is_symlink():
        error_message = f"Symlinks are not supported for security reasons: {filepath}"
        raise IOError(error_message)

    existing_stat = collect_file_stat(filepath) if filepath.exists() else None

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding=encoding, delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

            if existing_stat is None:
                os.chmod(tmp_file.name, NEW_FILE_PERMISSIONS)
            else:
                os.chmod(tmp_file.name, stat.S_IMODE(existing_stat.st_mode))
                uid = getattr(existing_stat, "st_uid", None)
                gid = getattr(existing_stat, "st_gid", None)
                if uid is not None and gid is not None and hasattr(os, "chown"):
                    try:
                        os.chown(tmp_file.name, uid, gid)
                    except PermissionError:
                        if warn is not None:
                            warn(
                                f"Warning: Could not preserve file ownership for {filepath.name} "
                                "(requires elevated privileges)"
                            )

        os.replace(temp_path, filepath)
    except OSError as error:
        error_message = f"Error writing {filepath}: {error}"
        raise IOError(error_message) from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
