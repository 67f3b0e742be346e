"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Callable, Mapping

import pytest


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for tests.

    Args:
        tmp_path: pytest's temporary directory fixture

    Returns:
        Path to temporary directory
    """
    return tmp_path


@pytest.fixture
def storage_root(temp_dir: Path) -> Path:
    """Return the library storage directory (not created up front).

    Args:
        temp_dir: Temporary directory fixture

    Returns:
        Path to storage directory
    """
    return temp_dir / "library"


@pytest.fixture
def books_dir(temp_dir: Path) -> Path:
    """Create a directory holding source archives.

    Args:
        temp_dir: Temporary directory fixture

    Returns:
        Path to books directory
    """
    books = temp_dir / "books"
    books.mkdir()
    return books


@pytest.fixture
def make_archive(books_dir: Path) -> Callable[..., Path]:
    """Return a factory writing zip archives into the books directory."""

    def _make(name: str, members: Mapping[str, bytes]) -> Path:
        archive = books_dir / name
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for member, content in members.items():
                zf.writestr(member, content)
        return archive

    return _make


@pytest.fixture
def epub(make_archive: Callable[..., Path]) -> Path:
    """A small book with one chapter and one image."""
    return make_archive(
        "Moby Dick.epub",
        {
            "chapter1.xhtml": b"<html><body>Call me Ishmael.</body></html>",
            "images/cover.png": b"\x89PNG\r\n\x1a\nfake-image-bytes",
        },
    )
