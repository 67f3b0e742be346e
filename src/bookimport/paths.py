"""Path derivation for imported books and directory classification."""

from __future__ import annotations

from pathlib import Path

STATE_DIRNAME = ".bookimport"
MARKER_SUFFIX = ".complete"


def book_name(archive_path: Path) -> str:
    """Return the archive's file name with its final extension removed.

    Examples:
        - "books/Moby Dick.epub" -> "Moby Dick"
        - "series.vol1.epub" -> "series.vol1"

    Raises:
        ValueError: If the path has no usable file name component
    """
    stem = Path(archive_path).stem
    if not stem or stem in {".", ".."}:
        raise ValueError(f"Cannot derive a book name from '{archive_path}'")
    return stem


def destination_for(archive_path: Path, storage_root: Path) -> Path:
    """Return the directory an archive is staged into.

    The result depends only on the archive's file name and the storage root,
    so importing the same book again always yields the same directory.
    """
    return Path(storage_root) / book_name(archive_path)


def marker_path(destination: Path) -> Path:
    """Return the completion marker belonging to a destination directory.

    Markers live in a state directory next to the destinations, never inside
    them, so an imported book mirrors its archive exactly.
    """
    return destination.parent / STATE_DIRNAME / f"{destination.name}{MARKER_SUFFIX}"


def is_import_complete(destination: Path) -> bool:
    # A marker whose directory was removed by hand does not count.
    return marker_path(destination).is_file() and destination.is_dir()


def is_directory(path: Path | str) -> bool:
    """Return True if ``path`` exists and is a directory.

    Missing paths, regular files and paths that cannot be inspected all
    classify as False.
    """
    if not str(path):
        return False
    try:
        return Path(path).is_dir()
    except (OSError, ValueError):
        return False


__all__ = [
    "STATE_DIRNAME",
    "MARKER_SUFFIX",
    "book_name",
    "destination_for",
    "marker_path",
    "is_import_complete",
    "is_directory",
]
