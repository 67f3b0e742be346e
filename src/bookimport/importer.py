"""Import EPUB archives into a storage root, once per book."""

from __future__ import annotations

import logging
import lzma
import os
import shutil
import threading
import zipfile
import zlib
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .errors import (
    ArchiveOpenFailed,
    BookImportError,
    CreateDirFailed,
    ExtractionFailed,
    OpenFailed,
    UnsafeMemberPath,
)
from .extraction import extract_members
from .paths import destination_for, is_import_complete, marker_path

_logger = logging.getLogger(__name__)

_EXTRACTION_ERRORS = (
    UnsafeMemberPath,
    OSError,
    zipfile.BadZipFile,
    zlib.error,
    lzma.LZMAError,
    ValueError,
    EOFError,
    NotImplementedError,
    RuntimeError,
)


@dataclass
class _LockEntry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


_locks: dict[str, _LockEntry] = {}
_locks_guard = threading.Lock()


@contextmanager
def destination_lock(destination: Path) -> Iterator[None]:
    """Serialize imports that target the same destination directory.

    Entries are dropped once their last holder releases them.
    """
    key = os.path.normcase(os.path.abspath(destination))
    with _locks_guard:
        entry = _locks.setdefault(key, _LockEntry())
        entry.holders += 1
    try:
        with entry.lock:
            yield
    finally:
        with _locks_guard:
            entry.holders -= 1
            if not entry.holders:
                del _locks[key]


@dataclass(frozen=True)
class ImportResult:
    """Outcome of an import as reported to a caller outside the library."""

    archive: Path
    destination: Path | None = None
    error: BookImportError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        return None if self.error is None else str(self.error)

    def to_dict(self) -> dict[str, str]:
        if self.error is not None:
            return self.error.to_dict()
        return {"path": str(self.destination)}


def import_book(
    archive_path: Path | str,
    storage_root: Path | str,
    *,
    cleanup_on_failure: bool = True,
) -> Path:
    """Extract an EPUB archive into ``storage_root/<book name>``.

    Once a book has been imported successfully, later calls for an archive
    with the same name return the existing directory without reading the
    archive contents again.

    Args:
        archive_path: Archive file to import
        storage_root: Directory holding all imported books
        cleanup_on_failure: Remove the destination again if this call created
            it and the import then failed

    Returns:
        The destination directory

    Raises:
        OpenFailed: If the archive file cannot be opened
        CreateDirFailed: If the destination directory cannot be created
        ArchiveOpenFailed: If the file is not a readable zip archive
        ExtractionFailed: If a member cannot be extracted
    """
    archive_path = Path(archive_path)
    storage_root = Path(storage_root)

    try:
        handle = archive_path.open("rb")
    except OSError as exc:
        raise OpenFailed(archive_path, exc) from exc

    with handle:
        destination = destination_for(archive_path, storage_root)
        with destination_lock(destination):
            if is_import_complete(destination):
                _logger.info("Already imported: %s", destination)
                return destination

            created = not os.path.lexists(destination)
            try:
                destination.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise CreateDirFailed(destination, exc) from exc

            try:
                _extract(handle, archive_path, destination)
            except BookImportError:
                if created and cleanup_on_failure:
                    _discard(destination)
                raise

    return destination


def try_import_book(
    archive_path: Path | str,
    storage_root: Path | str,
    *,
    cleanup_on_failure: bool = True,
) -> ImportResult:
    """Run :func:`import_book` and capture import failures in the result."""
    archive_path = Path(archive_path)
    try:
        destination = import_book(
            archive_path, storage_root, cleanup_on_failure=cleanup_on_failure
        )
    except BookImportError as exc:
        return ImportResult(archive=archive_path, error=exc)
    return ImportResult(archive=archive_path, destination=destination)


def _extract(handle, archive_path: Path, destination: Path) -> None:
    try:
        archive = zipfile.ZipFile(handle)
    except (
        zipfile.BadZipFile,
        OSError,
        EOFError,
        NotImplementedError,
        ValueError,
    ) as exc:
        raise ArchiveOpenFailed(archive_path, exc) from exc

    _logger.info("Importing %s into %s", archive_path.name, destination)
    with archive:
        try:
            extracted = extract_members(archive, destination)
        except _EXTRACTION_ERRORS as exc:
            raise ExtractionFailed(archive_path, exc) from exc

    marker = marker_path(destination)
    try:
        marker.parent.mkdir(parents=True, exist_ok=True)
        marker.touch()
    except OSError as exc:
        raise ExtractionFailed(archive_path, exc) from exc

    _logger.info("Imported %s (%s files)", destination.name, len(extracted))


def _discard(destination: Path) -> None:
    try:
        shutil.rmtree(destination)
    except OSError as exc:
        _logger.warning("Could not remove partial import %s: %s", destination, exc)
    else:
        _logger.info("Removed partial import %s", destination)


__all__ = [
    "ImportResult",
    "destination_lock",
    "import_book",
    "try_import_book",
]
