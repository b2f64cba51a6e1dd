"""
Sandboxed notes vault MCP server.
"""

from .errors import ConfigError, SandboxViolation, SymlinkError, TooLargeError, ValidationError
from .inventory import InventoryEntry, list_files
from .operations import OperationResult, Status
from .security import assert_containment, resolve_root, validate_write_path
from .todos import TodoRecord, scan_todos

__all__ = [
    "ConfigError",
    "InventoryEntry",
    "OperationResult",
    "SandboxViolation",
    "Status",
    "SymlinkError",
    "TodoRecord",
    "TooLargeError",
    "ValidationError",
    "assert_containment",
    "list_files",
    "resolve_root",
    "scan_todos",
    "validate_write_path",
]
