from __future__ import annotations

import errno
import logging
import os
import posixpath
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .errors import SandboxViolation, SymlinkTargetError, TooLargeError
from .inventory import list_paths
from .security import assert_containment, resolve_candidate

LOGGER = logging.getLogger(__name__)

MAX_READ_BYTES = 10 * 1024 * 1024
MAX_PARTIAL_MATCHES = 5
READ_FAILED_TEXT = "Failed to read file."

_READ_FLAGS = (
    os.O_RDONLY
    | getattr(os, "O_NOFOLLOW", 0)
    | getattr(os, "O_NONBLOCK", 0)
    | getattr(os, "O_CLOEXEC", 0)
)


@dataclass(frozen=True, slots=True)
class NameMatch:
    paths: tuple[str, ...]
    suppressed: int = 0


@dataclass(frozen=True, slots=True)
class FileContent:
    path: str
    content: Optional[str]
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class NameResult:
    name: str
    files: tuple[FileContent, ...]
    suppressed: int = 0

    @property
    def found(self) -> bool:
        return bool(self.files)


def read_file(root: Path, relative_path: str, limit: int = MAX_READ_BYTES) -> str:
    """
    Read a vault file as UTF-8 text, refusing anything above the size ceiling.

    Containment is checked again here even though callers pass enumerated
    paths. The size comes from fstat on the open descriptor, so an oversized
    file is never loaded.
    """
    resolved = resolve_candidate(root, relative_path)
    assert_containment(resolved, root)

    try:
        fd = os.open(resolved, _READ_FLAGS)
    except OSError as exc:
        if exc.errno == errno.ELOOP:
            raise SymlinkTargetError() from exc
        raise

    with os.fdopen(fd, "rb") as handle:
        info = os.fstat(handle.fileno())
        if not stat.S_ISREG(info.st_mode):
            raise OSError(errno.EINVAL, "Read target is not a regular file")
        if info.st_size > limit:
            raise TooLargeError(info.st_size, limit)
        data = handle.read(limit + 1)

    # The file may have grown between fstat and read.
    if len(data) > limit:
        raise TooLargeError(len(data), limit)
    return data.decode("utf-8", errors="replace")


def match_name(paths: Sequence[str], name: str, limit: int = MAX_PARTIAL_MATCHES) -> NameMatch:
    """Exact path, then case-insensitive path, then capped base-name substring."""
    if not name.strip():
        return NameMatch(())
    if name in paths:
        return NameMatch((name,))

    lowered = name.lower()
    for path in paths:
        if path.lower() == lowered:
            return NameMatch((path,))

    partial = [path for path in paths if lowered in posixpath.basename(path).lower()]
    return NameMatch(tuple(partial[:limit]), max(0, len(partial) - limit))


def _load(root: Path, path: str) -> Optional[FileContent]:
    try:
        return FileContent(path, read_file(root, path))
    except TooLargeError as exc:
        LOGGER.info("Skipped oversized file %s (%d bytes)", path, exc.size)
        return FileContent(path, None, str(exc))
    except (FileNotFoundError, SymlinkTargetError):
        LOGGER.info("File vanished or became a symlink after enumeration: %s", path)
        return None
    except SandboxViolation:
        raise
    except OSError:
        LOGGER.exception("Could not read %s", path)
        return FileContent(path, None, READ_FAILED_TEXT)


def read_by_names(root: Path, names: Iterable[str]) -> list[NameResult]:
    """Resolve every requested name against one inventory snapshot and read the matches."""
    paths = list_paths(root)
    results: list[NameResult] = []
    for name in names:
        match = match_name(paths, name)
        loaded = (_load(root, path) for path in match.paths)
        files = tuple(item for item in loaded if item is not None)
        results.append(NameResult(name, files, match.suppressed))
    return results
