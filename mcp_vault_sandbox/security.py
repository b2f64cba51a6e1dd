from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

from .errors import (
    AbsolutePathError,
    ConfigError,
    ContainmentError,
    DotSegmentError,
    ExtensionError,
    NullByteError,
    PathLimitError,
)

ALLOWED_EXTENSIONS = frozenset({".md", ".txt", ".csv", ".json", ".yaml", ".yml", ".canvas"})
MAX_PATH_LENGTH = 512
MAX_PATH_DEPTH = 10

_SEPARATORS = re.compile(r"[\\/]")
_ABSOLUTE = re.compile(r"^(?:[\\/]|[A-Za-z]:)")


def resolve_root(raw: Optional[str]) -> Path:
    """
    Turn the configured vault location into its canonical directory path.

    Symlinks are resolved here once so that every later prefix comparison
    runs against the real location rather than an alias of it.
    """
    if not raw:
        raise ConfigError(
            "Vault path must be provided as a command line argument.\n"
            "Usage: mcp-vault-sandbox <vault_path>"
        )

    candidate = Path(raw).expanduser().absolute()
    if not candidate.exists():
        raise ConfigError(
            f'Invalid vault path: "{raw}"\nPlease provide a path to an existing directory'
        )
    if not candidate.is_dir():
        raise ConfigError(f'Invalid vault path: "{raw}"\nPath must be a directory, not a file')

    return candidate.resolve(strict=True)


def path_segments(user_path: str) -> list[str]:
    return [segment for segment in _SEPARATORS.split(user_path) if segment]


def reject_null_bytes(user_path: str) -> None:
    if "\x00" in user_path:
        raise NullByteError()


def reject_absolute_path(user_path: str) -> None:
    """Refuse rooted paths and drive prefixes; joining them would discard the root."""
    if os.path.isabs(user_path) or _ABSOLUTE.match(user_path):
        raise AbsolutePathError()


def reject_dot_segments(user_path: str) -> None:
    """Refuse any segment starting with '.', which covers both '..' and hidden paths."""
    if any(segment.startswith(".") for segment in path_segments(user_path)):
        raise DotSegmentError()


def reject_disallowed_extension(user_path: str) -> None:
    segments = path_segments(user_path)
    name = segments[-1] if segments else ""
    extension = os.path.splitext(name)[1].lower()
    if extension not in ALLOWED_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_EXTENSIONS))
        shown = extension or "(none)"
        raise ExtensionError(f'File extension "{shown}" is not allowed. Allowed extensions: {allowed}')


def enforce_path_limits(user_path: str) -> None:
    if len(user_path) > MAX_PATH_LENGTH:
        raise PathLimitError(f"File path exceeds maximum length of {MAX_PATH_LENGTH} characters.")
    if len(path_segments(user_path)) > MAX_PATH_DEPTH:
        raise PathLimitError(f"File path exceeds maximum depth of {MAX_PATH_DEPTH} levels.")


def resolve_candidate(root: Path, user_path: str) -> Path:
    """Join a caller path onto the root and normalize it without touching the filesystem."""
    return Path(os.path.normpath(os.path.join(root, user_path)))


def assert_containment(resolved: Path, root: Path) -> None:
    """Ensure the path is a strict descendant of the root; the root itself is refused."""
    prefix = str(root) if str(root).endswith(os.sep) else str(root) + os.sep
    if resolved == root or not str(resolved).startswith(prefix):
        raise ContainmentError()


def validate_write_path(root: Path, user_path: str) -> Path:
    """
    Run the write-side checks in order and return the resolved target.

    Structural checks come first; containment assumes they already passed.
    """
    reject_null_bytes(user_path)
    reject_absolute_path(user_path)
    reject_dot_segments(user_path)
    reject_disallowed_extension(user_path)
    enforce_path_limits(user_path)

    resolved = resolve_candidate(root, user_path)
    assert_containment(resolved, root)
    return resolved
