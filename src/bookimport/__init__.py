"""BookImport: stage EPUB archives into an application storage root."""

from __future__ import annotations

__version__ = "0.1.0"

from .errors import (
    ArchiveOpenFailed,
    BookImportError,
    CreateDirFailed,
    ExtractionFailed,
    OpenFailed,
)
from .importer import ImportResult, import_book, try_import_book
from .paths import destination_for, is_directory

__all__ = [
    "__version__",
    # Import
    "import_book",
    "try_import_book",
    "ImportResult",
    # Path queries
    "destination_for",
    "is_directory",
    # Errors
    "BookImportError",
    "OpenFailed",
    "CreateDirFailed",
    "ArchiveOpenFailed",
    "ExtractionFailed",
]
