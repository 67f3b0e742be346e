from __future__ import annotations

from pathlib import Path

import pytest

from bookimport.paths import (
    book_name,
    destination_for,
    is_directory,
    is_import_complete,
    marker_path,
)


def test_destination_uses_stem_of_archive() -> None:
    destination = destination_for(Path("books/Moby Dick.epub"), Path("/data/lib"))
    assert destination == Path("/data/lib/Moby Dick")


def test_destination_is_deterministic() -> None:
    first = destination_for(Path("a/b/Emma.epub"), Path("/lib"))
    second = destination_for(Path("/elsewhere/Emma.epub"), Path("/lib"))
    assert first == second == Path("/lib/Emma")


@pytest.mark.parametrize(
    ("archive", "expected"),
    [
        ("series.vol1.epub", "series.vol1"),
        ("README", "README"),
        (".hidden", ".hidden"),
    ],
)
def test_book_name_strips_only_final_extension(archive: str, expected: str) -> None:
    assert book_name(Path(archive)) == expected


def test_book_name_rejects_empty_name() -> None:
    with pytest.raises(ValueError):
        book_name(Path("/"))


def test_marker_lives_outside_destination(tmp_path: Path) -> None:
    destination = tmp_path / "Moby Dick"
    marker = marker_path(destination)
    assert destination not in marker.parents
    assert marker.parent.parent == tmp_path


def test_import_complete_requires_marker_and_directory(tmp_path: Path) -> None:
    destination = tmp_path / "Emma"
    marker = marker_path(destination)
    marker.parent.mkdir()
    marker.touch()
    assert is_import_complete(destination) is False

    destination.mkdir()
    assert is_import_complete(destination) is True

    marker.unlink()
    assert is_import_complete(destination) is False


def test_is_directory_classification(tmp_path: Path) -> None:
    regular = tmp_path / "file.txt"
    regular.write_text("x", encoding="utf-8")

    assert is_directory(tmp_path) is True
    assert is_directory(regular) is False
    assert is_directory(tmp_path / "missing") is False
    assert is_directory(str(tmp_path)) is True


def test_is_directory_never_raises(tmp_path: Path) -> None:
    assert is_directory("") is False
    assert is_directory(tmp_path / "bad\x00name") is False
    assert is_directory(tmp_path / "file.txt" / "child") is False
