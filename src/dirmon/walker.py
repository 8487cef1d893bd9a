"""Directory tree walking for dirmon.

The walker produces one FileRecord per entry below a root. Entries that
cannot be read are skipped so a single unreadable file never aborts the walk.
"""

import logging
import os
import stat
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from dirmon.errors import RootAccessError, ScanCancelled
from dirmon.models import FileRecord

logger = logging.getLogger(__name__)


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def ensure_root(root: str | Path) -> Path:
    """
    Resolve and validate the root of an operation.

    Args:
        root: Directory path (may contain ~)

    Returns:
        Absolute path to the directory

    Raises:
        RootAccessError: If the path is missing, not a directory, or unreadable
    """
    path = expand_path(str(root)).absolute()

    try:
        st = path.stat()
    except FileNotFoundError as e:
        raise RootAccessError(str(path), "no such file or directory") from e
    except OSError as e:
        raise RootAccessError(str(path), e.strerror or str(e)) from e

    if not stat.S_ISDIR(st.st_mode):
        raise RootAccessError(str(path), "not a directory")

    try:
        with os.scandir(path):
            pass
    except OSError as e:
        raise RootAccessError(str(path), e.strerror or str(e)) from e

    return path


def _record_from_entry(entry: os.DirEntry) -> FileRecord:
    st = entry.stat(follow_symlinks=False)
    is_dir = entry.is_dir(follow_symlinks=False)
    return FileRecord(
        path=entry.path,
        is_dir=is_dir,
        is_symlink=entry.is_symlink(),
        size=0 if is_dir else st.st_size,
        modified_at=datetime.fromtimestamp(st.st_mtime),
    )


def walk(
    root: str | Path,
    cancel: Optional[threading.Event] = None,
) -> Iterator[FileRecord]:
    """
    Recursively enumerate every entry below root (pre-order).

    Uses os.scandir and never follows symlinks, so each reachable entry is
    visited exactly once. The root itself is not yielded.

    Args:
        root: Directory to walk (should already be validated with ensure_root)
        cancel: Optional event; when set, the walk raises ScanCancelled

    Yields:
        FileRecord for each file and directory below root
    """
    stack = [str(root)]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except (PermissionError, OSError) as e:
            logger.debug("Skipping unreadable directory %s: %s", current, e)
            continue

        subdirs = []
        for entry in entries:
            if cancel is not None and cancel.is_set():
                raise ScanCancelled(f"walk of {root} cancelled")
            try:
                record = _record_from_entry(entry)
            except (PermissionError, OSError) as e:
                logger.debug("Skipping unreadable entry %s: %s", entry.path, e)
                continue

            yield record
            if record.is_dir:
                subdirs.append(record.path)

        # Reversed so the stack pops subdirectories in name order
        stack.extend(reversed(subdirs))


def list_directory(path: str | Path) -> list[FileRecord]:
    """
    List the direct children of a directory.

    Args:
        path: Directory to list

    Returns:
        FileRecords sorted with directories first, then by name

    Raises:
        RootAccessError: If the directory cannot be read
    """
    root = ensure_root(path)
    records = []

    with os.scandir(root) as it:
        for entry in it:
            try:
                records.append(_record_from_entry(entry))
            except (PermissionError, OSError) as e:
                logger.debug("Skipping unreadable entry %s: %s", entry.path, e)

    records.sort(key=lambda r: (not r.is_dir, r.name.lower()))
    return records
