"""
Lazy filesystem traversal.

walk() yields one WalkEntry per entity under a root, the root itself first,
then depth-first with parents before their children and siblings in name
order. Directories are listed only when the consumer pulls past them, so a
consumer may change a directory's mode before its contents are read.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class WalkEntry:
    path: str
    mode: int
    is_dir: bool

    @property
    def permission_bits(self) -> int:
        return stat.S_IMODE(self.mode) & 0o777

    @property
    def special_bits(self) -> int:
        """setuid, setgid and sticky bits of the entity."""
        return stat.S_IMODE(self.mode) & 0o7000


def _entry(path: str, st: os.stat_result) -> WalkEntry:
    return WalkEntry(path=path, mode=st.st_mode, is_dir=stat.S_ISDIR(st.st_mode))


def walk(root: str | os.PathLike) -> Iterator[WalkEntry]:
    """
    Walk a file or directory tree.

    Symlinks are reported as entries but never followed.

    Args:
        root: File or directory to start from

    Yields:
        WalkEntry for the root and everything below it

    Raises:
        OSError: If an entity vanishes or a directory cannot be listed
    """
    root = os.fspath(root)
    entry = _entry(root, os.lstat(root))
    yield entry

    if not entry.is_dir:
        return

    # One iterator of pending children per open directory level
    stack = [iter(_list_dir(root))]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue

        entry = _entry(child.path, child.stat(follow_symlinks=False))
        yield entry

        if entry.is_dir:
            stack.append(iter(_list_dir(child.path)))


def _list_dir(path: str) -> list[os.DirEntry]:
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)
