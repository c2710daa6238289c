"""
Directory walk producing FileRecord entries for matching files.
"""

import os
import sys
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .filters import FilePredicate
from .progress import ProgressTracker
from .utils import display_path, format_owner_name


@dataclass(frozen=True)
class FileRecord:
    """One matching regular file."""

    owner: str
    size_bytes: int
    modified: float
    path: str


def warn_unreadable(path: str, error: OSError, progress: Optional[ProgressTracker] = None):
    reason = error.strerror or str(error)
    print(f"[WARN] Cannot read {display_path(path)}: {reason}", file=sys.stderr)
    if progress:
        progress.increment_unreadable()


def _list_directory(path: str, progress: Optional[ProgressTracker]) -> Optional[List[os.DirEntry]]:
    """Entries of one directory in name order, or None if it cannot be read."""
    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        warn_unreadable(path, e, progress)
        return None

    if progress:
        progress.update(dirs=1)
    return entries


def walk_tree(
    root: str,
    file_filter: FilePredicate,
    progress: Optional[ProgressTracker] = None,
) -> Iterator[FileRecord]:
    """
    Walk a directory tree and yield a FileRecord per matching file.

    Entries are visited depth-first in name order. Open directories are kept
    on an explicit stack, so tree depth is not limited by the interpreter's
    recursion limit. Only regular files are passed to the filter; symlinks
    are never followed and special files are ignored. Entries that cannot be
    read are reported with a [WARN] line and skipped without stopping the walk.

    Args:
        root: Directory to walk (must already be validated as a directory)
        file_filter: Predicate called once per regular file with (name, stat)
        progress: Optional ProgressTracker for counting objects and matches

    Yields:
        FileRecord for each file accepted by file_filter
    """
    owner_cache = {}  # uid -> owner name

    entries = _list_directory(root, progress)
    if entries is None:
        return
    stack = [iter(entries)]

    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        if progress:
            progress.update(objects=1)

        try:
            if entry.is_symlink():
                continue

            if entry.is_dir(follow_symlinks=False):
                is_dir = True
            elif entry.is_file(follow_symlinks=False):
                is_dir = False
                st = entry.stat(follow_symlinks=False)
            else:
                continue
        except OSError as e:
            warn_unreadable(entry.path, e, progress)
            continue

        if is_dir:
            children = _list_directory(entry.path, progress)
            if children is not None:
                stack.append(iter(children))
            continue

        if not file_filter(entry.name, st):
            continue

        uid = st.st_uid
        if uid not in owner_cache:
            owner_cache[uid] = format_owner_name(uid)

        if progress:
            progress.update(matches=1)

        yield FileRecord(
            owner=owner_cache[uid],
            size_bytes=st.st_size,
            modified=st.st_mtime,
            path=entry.path,
        )
