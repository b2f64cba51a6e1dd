from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .errors import SandboxViolation, SymlinkTargetError, TooLargeError
from .inventory import list_files
from .reader import read_file

LOGGER = logging.getLogger(__name__)

TODO_EXTENSION = ".md"
OPEN_TODO = re.compile(r"- \[ \] .+")


@dataclass(frozen=True, slots=True)
class TodoRecord:
    path: str
    line: str


def scan_todos(root: Path) -> list[TodoRecord]:
    """Collect unchecked checklist lines from markdown files, in listing order."""
    records: list[TodoRecord] = []
    for entry in list_files(root):
        if not entry.path.lower().endswith(TODO_EXTENSION):
            continue
        try:
            content = read_file(root, entry.path)
        except TooLargeError:
            LOGGER.debug("Oversized file skipped during todo scan: %s", entry.path)
            continue
        except (FileNotFoundError, SymlinkTargetError):
            continue
        except SandboxViolation:
            raise
        except OSError:
            LOGGER.exception("Unreadable file skipped during todo scan: %s", entry.path)
            continue

        for line in content.splitlines():
            if OPEN_TODO.search(line):
                records.append(TodoRecord(entry.path, line.strip()))
    return records
