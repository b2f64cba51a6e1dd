from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from .errors import ContainmentError
from .security import assert_containment

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InventoryEntry:
    """A vault file as seen by one enumeration pass."""

    path: str
    mtime: float


def _visible(name: str) -> bool:
    return not name.startswith(".")


def list_files(root: Path) -> list[InventoryEntry]:
    """
    Enumerate regular files under the root, most recently modified first.

    Dot-prefixed names are skipped at every depth, symlinked directories are
    never descended and symlinked files are left out.
    """
    entries: list[InventoryEntry] = []

    for current, dirs, files in os.walk(root, followlinks=False):
        current_path = Path(current)
        dirs[:] = sorted(d for d in dirs if _visible(d) and not (current_path / d).is_symlink())

        for name in sorted(files):
            if not _visible(name):
                continue
            candidate = current_path / name
            try:
                info = candidate.lstat()
            except FileNotFoundError:
                continue
            if not stat.S_ISREG(info.st_mode):
                continue
            try:
                assert_containment(candidate, root)
            except ContainmentError:
                LOGGER.warning("Enumerated path outside the vault skipped: %s", candidate)
                continue
            entries.append(InventoryEntry(candidate.relative_to(root).as_posix(), info.st_mtime))

    entries.sort(key=lambda entry: entry.mtime, reverse=True)
    return entries


def list_paths(root: Path) -> list[str]:
    return [entry.path for entry in list_files(root)]
