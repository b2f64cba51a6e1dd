from __future__ import annotations


class ConfigError(ValueError):
    """Raised when the vault root is missing or unusable at startup."""


class SandboxViolation(PermissionError):
    """Base for rejections whose message is safe to return to the caller."""


class ValidationError(SandboxViolation):
    """A candidate path or request failed a structural check."""


class NullByteError(ValidationError):
    def __init__(self) -> None:
        super().__init__("File path contains null bytes.")


class AbsolutePathError(ValidationError):
    def __init__(self) -> None:
        super().__init__("File path must be relative to the vault directory.")


class DotSegmentError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Cannot write to dot-prefixed files or directories.")


class ExtensionError(ValidationError):
    pass


class PathLimitError(ValidationError):
    pass


class ContainmentError(ValidationError):
    def __init__(self) -> None:
        super().__init__("File path escapes the vault directory.")


class RequestLimitError(ValidationError):
    """Request arguments exceed a size or count ceiling."""


class InvalidContentError(ValidationError):
    pass


class SymlinkError(SandboxViolation):
    pass


class SymlinkedParentError(SymlinkError):
    def __init__(self) -> None:
        super().__init__("Cannot write through a symlinked directory.")


class SymlinkTargetError(SymlinkError):
    def __init__(self) -> None:
        super().__init__("Cannot write to a symbolic link.")


class TooLargeError(Exception):
    """File exceeds the read size ceiling; content was not loaded."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"File is too large to read ({size} bytes, limit {limit} bytes).")
        self.size = size
        self.limit = limit
