"""Error types raised by the import pipeline."""

from __future__ import annotations

from pathlib import Path


class BookImportError(RuntimeError):
    """Base class for every recoverable import failure.

    Each subclass corresponds to the step that failed. The offending path and
    the underlying cause are kept as attributes; ``str()`` renders the message
    shown to users, e.g. ``Failed to open file 'a.epub': <cause>``.
    """

    kind = "import"

    def __init__(self, path: Path, cause: BaseException | str) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(str(self))

    @property
    def context(self) -> str:
        return f"Import of '{self.path}' failed"

    def __str__(self) -> str:
        return f"{self.context}: {self.cause}"

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "path": str(self.path), "error": str(self)}


class OpenFailed(BookImportError):
    """The archive file could not be opened for reading."""

    kind = "open"

    @property
    def context(self) -> str:
        return f"Failed to open file '{self.path}'"


class CreateDirFailed(BookImportError):
    """The destination directory (or one of its ancestors) could not be created."""

    kind = "create_dir"

    @property
    def context(self) -> str:
        return f"Failed to create destination '{self.path}'"


class ArchiveOpenFailed(BookImportError):
    """The file was readable but is not a valid zip container."""

    kind = "archive_open"

    @property
    def context(self) -> str:
        return f"Failed to read archive '{self.path}'"


class ExtractionFailed(BookImportError):
    """A member could not be written into the destination."""

    kind = "extraction"

    @property
    def context(self) -> str:
        return f"Failed to extract EPUB archive '{self.path}'"


class UnsafeMemberPath(ValueError):
    """Raised when an archive member would be written outside the destination."""

    def __init__(self, member: str) -> None:
        self.member = member
        super().__init__(f"Unsafe member path detected: {member!r}")


__all__ = [
    "BookImportError",
    "OpenFailed",
    "CreateDirFailed",
    "ArchiveOpenFailed",
    "ExtractionFailed",
    "UnsafeMemberPath",
]
