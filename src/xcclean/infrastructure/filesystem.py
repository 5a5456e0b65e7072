"""Filesystem measurement and removal.

INVARIANT: Only children of a category root are ever removed. Every
removal is checked against its root after resolving symlinks, so a
crafted link inside a cache directory cannot redirect deletion
elsewhere.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class UnsafePathError(ValueError):
    """Raised when a removal target is not strictly inside its root."""


@dataclass(frozen=True)
class Entry:
    """One immediate child of a category root."""

    path: Path
    size: int
    modified: float

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class DiskUsage:
    """Capacity of the volume holding a path."""

    total: int
    used: int
    free: int

    @property
    def percent_used(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.used / self.total * 100, 1)


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------


def directory_size(path: Path) -> int:
    """Apparent size in bytes of a file or directory tree.

    Symlinks are not followed and contribute nothing. Hard-linked files
    are counted once. Unreadable entries are skipped.
    """
    try:
        st = path.lstat()
    except OSError:
        logger.debug("Cannot stat %s", path, exc_info=True)
        return 0
    if stat.S_ISLNK(st.st_mode):
        return 0
    if not stat.S_ISDIR(st.st_mode):
        return st.st_size

    seen: set[tuple[int, int]] = set()
    total = 0
    stack = [str(path)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for dirent in it:
                    try:
                        est = dirent.stat(follow_symlinks=False)
                    except OSError:
                        logger.debug("Cannot stat %s", dirent.path, exc_info=True)
                        continue
                    if stat.S_ISLNK(est.st_mode):
                        continue
                    if stat.S_ISDIR(est.st_mode):
                        stack.append(dirent.path)
                        continue
                    if est.st_nlink > 1:
                        ident = (est.st_dev, est.st_ino)
                        if ident in seen:
                            continue
                        seen.add(ident)
                    total += est.st_size
        except OSError:
            logger.debug("Cannot read directory %s", current, exc_info=True)
    return total


def list_entries(root: Path) -> list[Entry]:
    """Immediate children of *root* with their sizes, largest first.

    A missing root yields an empty list.
    """
    if not root.is_dir():
        return []
    entries: list[Entry] = []
    try:
        children = list(root.iterdir())
    except OSError:
        logger.warning("Cannot list %s", root, exc_info=True)
        return []
    for child in children:
        try:
            mtime = child.lstat().st_mtime
        except OSError:
            continue
        entries.append(Entry(path=child, size=directory_size(child), modified=mtime))
    entries.sort(key=lambda e: (-e.size, e.name))
    return entries


def disk_usage(path: Path) -> DiskUsage:
    """Total/used/free bytes of the volume holding *path*.

    Walks up to the nearest existing ancestor so a missing path still
    reports its volume.
    """
    existing = path
    while not existing.exists() and existing.parent != existing:
        existing = existing.parent
    usage = shutil.disk_usage(existing)
    return DiskUsage(total=usage.total, used=usage.used, free=usage.free)


# ---------------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------------


def ensure_inside(path: Path, root: Path) -> None:
    """Raise UnsafePathError unless *path* lies strictly inside *root*.

    The parent directory is resolved (so symlinked ancestors are followed)
    but the final component is not, so a symlink entry is judged by where
    it sits, not where it points.
    """
    root_resolved = root.resolve()
    target = path.parent.resolve() / path.name
    if target == root_resolved or not target.is_relative_to(root_resolved):
        msg = f"Refusing to remove {path}: not inside {root}"
        raise UnsafePathError(msg)


def remove_path(
    path: Path,
    root: Path,
    *,
    trash: bool = False,
    trash_dir: Path | None = None,
) -> None:
    """Remove *path* (file, symlink or tree), which must live inside *root*.

    With ``trash=True`` the item is moved into *trash_dir* (default
    ``~/.Trash``) under a unique name instead of being deleted.
    """
    ensure_inside(path, root)

    if trash:
        destination_dir = trash_dir or Path.home() / ".Trash"
        destination_dir.mkdir(parents=True, exist_ok=True)
        destination = _unique_trash_name(destination_dir, path.name)
        shutil.move(str(path), str(destination))
        logger.debug("Moved %s to %s", path, destination)
        return

    if path.is_symlink() or not path.is_dir():
        path.unlink()
    else:
        shutil.rmtree(path, onexc=_make_writable_and_retry)
    logger.debug("Removed %s", path)


def _unique_trash_name(trash_dir: Path, name: str) -> Path:
    """Pick a free name in the trash, appending a timestamp like Finder does."""
    candidate = trash_dir / name
    if not candidate.exists() and not candidate.is_symlink():
        return candidate
    stamp = time.strftime("%H.%M.%S")
    candidate = trash_dir / f"{name} {stamp}"
    counter = 1
    while candidate.exists() or candidate.is_symlink():
        candidate = trash_dir / f"{name} {stamp} {counter}"
        counter += 1
    return candidate


def _make_writable_and_retry(func, path, exc) -> None:  # type: ignore[no-untyped-def]
    """rmtree error handler: grant the owner access once and retry.

    rmtree reports an unreadable directory through ``os.open`` or
    ``os.scandir``, neither of which can simply be called again on the
    path. Such a directory is opened up and removed with a nested rmtree.
    """
    if not os.path.lexists(path):
        return
    parent = os.path.dirname(path)
    os.chmod(parent, os.stat(parent).st_mode | stat.S_IRWXU)
    mode = os.lstat(path).st_mode
    if func in (os.open, os.scandir):
        if stat.S_ISLNK(mode) or mode & stat.S_IRWXU == stat.S_IRWXU:
            raise exc
        os.chmod(path, mode | stat.S_IRWXU)
        shutil.rmtree(path, onexc=_make_writable_and_retry)
        return
    if not stat.S_ISLNK(mode):
        os.chmod(path, mode | stat.S_IWUSR)
    func(path)
