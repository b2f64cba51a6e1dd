"""
Symlink checks for the write path.

Two escape routes exist: the final component being a link, closed by opening
with O_NOFOLLOW in a single call, and an intermediate directory being a link,
closed by walking the ancestors because O_NOFOLLOW only polices the last
segment.
"""

from __future__ import annotations

import errno
import logging
import os
import stat
from pathlib import Path

from .errors import ContainmentError, SymlinkedParentError, SymlinkTargetError

LOGGER = logging.getLogger(__name__)

FILE_MODE = 0o644
DIR_MODE = 0o755

_NOFOLLOW = getattr(os, "O_NOFOLLOW", 0)
_WRITE_FLAGS = (
    os.O_WRONLY
    | os.O_CREAT
    | os.O_TRUNC
    | getattr(os, "O_NONBLOCK", 0)
    | getattr(os, "O_CLOEXEC", 0)
)


def assert_no_symlinked_ancestors(resolved: Path, root: Path) -> None:
    """Fail if any existing directory between the target and the root is a symlink."""
    current = resolved.parent
    while current != root:
        if root not in current.parents:
            raise ContainmentError()
        if current.is_symlink():
            LOGGER.warning("Symlinked ancestor refused: %s", current)
            raise SymlinkedParentError()
        current = current.parent


def ensure_parent_directories(resolved: Path, root: Path) -> None:
    """
    Create missing directories between the root and the target one level at a time.

    Each level is checked before it is used so that creation never happens on
    the far side of a symlink. The full ancestor walk runs again afterwards to
    cover the directories that did not exist at the first look.
    """
    current = root
    for part in resolved.parent.relative_to(root).parts:
        current = current / part
        if current.is_symlink():
            LOGGER.warning("Symlinked ancestor refused: %s", current)
            raise SymlinkedParentError()
        try:
            os.mkdir(current, DIR_MODE)
        except FileExistsError:
            if current.is_symlink():
                raise SymlinkedParentError() from None
        else:
            LOGGER.debug("Created directory %s", current)

    assert_no_symlinked_ancestors(resolved, root)


def write_no_follow(resolved: Path, data: bytes) -> None:
    """Create or truncate the target and write data, refusing a symlinked final component."""
    if not _NOFOLLOW:
        raise OSError(errno.ENOSYS, "O_NOFOLLOW is not available on this platform")

    try:
        fd = os.open(resolved, _WRITE_FLAGS | _NOFOLLOW, FILE_MODE)
    except OSError as exc:
        if exc.errno == errno.ELOOP:
            LOGGER.warning("Symlink target refused: %s", resolved)
            raise SymlinkTargetError() from exc
        raise

    with os.fdopen(fd, "wb") as handle:
        if not stat.S_ISREG(os.fstat(handle.fileno()).st_mode):
            raise OSError(errno.EINVAL, "Write target is not a regular file")
        handle.write(data)
