"""
The four operations exposed to agents.

Every function returns an OperationResult and never raises. Sandbox
violations are echoed back verbatim; anything unexpected is logged and
replaced by a fixed message so OS error text never reaches the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError as RequestValidationError

from .config import get_root
from .errors import InvalidContentError, RequestLimitError, SandboxViolation
from .inventory import list_paths
from .models import (
    CONTENT_ENCODING_ERROR,
    CONTENT_TOO_LARGE_ERROR,
    MAX_NAMES_PER_REQUEST,
    MAX_WRITE_BYTES,
    ReadRequest,
    WriteRequest,
)
from .reader import read_by_names
from .security import validate_write_path
from .symlinks import ensure_parent_directories, write_no_follow
from .todos import scan_todos

LOGGER = logging.getLogger(__name__)

NOT_FOUND_TEXT = "File not found in vault."


class Status(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class OperationResult:
    status: Status
    text: str

    @property
    def ok(self) -> bool:
        return self.status is Status.SUCCESS


def _success(text: str) -> OperationResult:
    return OperationResult(Status.SUCCESS, text)


def _rejected(exc: SandboxViolation) -> OperationResult:
    return OperationResult(Status.REJECTED, f"Error: {exc}")


def _failed(text: str) -> OperationResult:
    return OperationResult(Status.FAILED, f"Error: {text}")


def list_vault_files(root: Optional[Path] = None) -> OperationResult:
    try:
        paths = list_paths(root or get_root())
    except Exception:
        LOGGER.exception("Listing failed")
        return _failed("Failed to list files.")

    header = f"# All files in vault (note: today's date is {date.today().isoformat()})"
    return _success(f"{header}\n\n" + "\n".join(paths))


def _format_file(path: str, body: str) -> str:
    return f"# File: {path}\n\n{body}"


def read_files(filenames: List[str], root: Optional[Path] = None) -> OperationResult:
    try:
        request = ReadRequest(filenames=filenames)
    except RequestValidationError:
        return _rejected(
            RequestLimitError(f"At most {MAX_NAMES_PER_REQUEST} filenames may be requested at once.")
        )

    try:
        results = read_by_names(root or get_root(), request.filenames)
    except SandboxViolation as exc:
        LOGGER.warning("Read rejected: %s", exc)
        return _rejected(exc)
    except Exception:
        LOGGER.exception("Read failed")
        return _failed("Failed to read files.")

    blocks: list[str] = []
    for result in results:
        if not result.found:
            blocks.append(_format_file(result.name, NOT_FOUND_TEXT))
        for item in result.files:
            body = item.content if item.content is not None else f"Error: {item.error}"
            blocks.append(_format_file(item.path, body))
        if result.suppressed:
            blocks.append(
                f'# Note: {result.suppressed} more files match "{result.name}" and were not read. '
                "Use a more specific name to read them."
            )

    if not blocks:
        return _success("No matching files found in the vault.")
    return _success("\n\n".join(blocks))


def open_todos(root: Optional[Path] = None) -> OperationResult:
    try:
        records = scan_todos(root or get_root())
    except Exception:
        LOGGER.exception("Todo scan failed")
        return _failed("Failed to scan for TODOs.")

    if not records:
        return _success("No open TODOs found in the vault.")
    lines = "\n".join(f"- **{record.path}**: {record.line}" for record in records)
    return _success(f"# Open TODOs in vault ({len(records)} items)\n\n{lines}")


def _write_request_error(exc: RequestValidationError) -> SandboxViolation:
    kinds = {error["type"] for error in exc.errors()}
    if CONTENT_ENCODING_ERROR in kinds:
        return InvalidContentError("Content is not valid UTF-8 text.")
    if CONTENT_TOO_LARGE_ERROR in kinds:
        return RequestLimitError(f"Content exceeds maximum size of {MAX_WRITE_BYTES} bytes.")
    return InvalidContentError("Invalid write request.")


def write_file(file_path: str, content: str, root: Optional[Path] = None) -> OperationResult:
    """Create or replace a vault file; reports whether it was created or updated."""
    try:
        request = WriteRequest(file_path=file_path, content=content)
    except RequestValidationError as exc:
        return _rejected(_write_request_error(exc))

    try:
        vault = root or get_root()
        resolved = validate_write_path(vault, request.file_path)
        relative = resolved.relative_to(vault).as_posix()
        existed = relative in list_paths(vault)

        ensure_parent_directories(resolved, vault)
        data = request.content.encode("utf-8")
        write_no_follow(resolved, data)
    except SandboxViolation as exc:
        LOGGER.info("Write rejected for %r: %s", file_path, exc)
        return _rejected(exc)
    except Exception:
        LOGGER.exception("Write failed for %r", file_path)
        return _failed("Failed to write file.")

    LOGGER.info("Wrote %d bytes to %s", len(data), relative)
    if existed:
        return _success(f"Successfully updated existing file: {relative}")
    return _success(f"Successfully created new file: {relative}")
