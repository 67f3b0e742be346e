"""Zip member validation and extraction."""

from __future__ import annotations

import logging
import re
import shutil
import stat
import zipfile
from pathlib import Path, PurePosixPath

from .errors import UnsafeMemberPath

_logger = logging.getLogger(__name__)

# Upper 16 bits of ZipInfo.external_attr carry st_mode for archives built on Unix.
_UNIX_CREATOR = 3
_OWNER_RW = stat.S_IRUSR | stat.S_IWUSR
# No setuid, setgid, sticky or world-write bits from untrusted archives.
_ALLOWED_MODE_BITS = 0o777 & ~stat.S_IWOTH
_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def member_relative_path(name: str) -> PurePosixPath | None:
    """Validate an archive member name and return its path relative to the destination.

    Returns None for entries that name the archive root itself (e.g. "./").

    Raises:
        UnsafeMemberPath: If the name is absolute, drive-qualified or climbs
            above the destination with ``..`` segments
    """
    normalized = name.replace("\\", "/")
    relative = PurePosixPath(normalized)
    if relative.is_absolute():
        raise UnsafeMemberPath(name)
    if _DRIVE_RE.match(normalized):
        raise UnsafeMemberPath(name)
    if any(part == ".." for part in relative.parts):
        raise UnsafeMemberPath(name)
    if not relative.parts:
        return None
    return relative


def resolve_member_target(destination: Path, name: str) -> Path | None:
    """Return the absolute location a member is written to inside ``destination``."""
    relative = member_relative_path(name)
    if relative is None:
        return None
    root = destination.resolve()
    target = (root / Path(*relative.parts)).resolve()
    if target != root and root not in target.parents:
        raise UnsafeMemberPath(name)
    return target


def _apply_member_mode(info: zipfile.ZipInfo, target: Path) -> None:
    if info.create_system != _UNIX_CREATOR:
        return
    mode = stat.S_IMODE(info.external_attr >> 16) & _ALLOWED_MODE_BITS
    if not mode:
        return
    target.chmod(mode | _OWNER_RW)


def extract_members(archive: zipfile.ZipFile, destination: Path) -> list[Path]:
    """Extract every member of ``archive`` into ``destination``.

    All member names are validated before anything is written, so an archive
    containing a traversal entry leaves the destination untouched.

    Returns:
        Relative paths of the extracted files, in archive order

    Raises:
        UnsafeMemberPath: If any member would land outside ``destination``
        OSError: If a directory or file cannot be written
        zipfile.BadZipFile: If a member's data is corrupt
    """
    plan: list[tuple[zipfile.ZipInfo, Path]] = []
    for info in archive.infolist():
        target = resolve_member_target(destination, info.filename)
        if target is not None:
            plan.append((info, target))

    root = destination.resolve()
    extracted: list[Path] = []
    for info, target in plan:
        if info.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        with archive.open(info, "r") as src, target.open("wb") as dst:
            shutil.copyfileobj(src, dst)
        _apply_member_mode(info, target)

        relative = target.relative_to(root)
        _logger.debug("Extracted %s", relative)
        extracted.append(relative)

    return extracted


__all__ = [
    "member_relative_path",
    "resolve_member_target",
    "extract_members",
]
