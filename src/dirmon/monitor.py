"""Polling change notification for monitored directories.

Each cycle takes a snapshot of a directory's direct children and compares it
to the previous one.
"""

import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from dirmon.models import ChangeEvent, ChangeKind

logger = logging.getLogger(__name__)

Snapshot = dict[str, tuple[int, float]]


def snapshot(directory: str | Path) -> Snapshot:
    """
    Capture (size, mtime) of every direct child of a directory.

    Raises:
        OSError: If the directory itself cannot be read
    """
    entries: Snapshot = {}
    with os.scandir(directory) as it:
        for entry in it:
            try:
                stat = entry.stat(follow_symlinks=False)
            except OSError:
                continue
            entries[entry.path] = (stat.st_size, stat.st_mtime)
    return entries


def diff_snapshots(before: Snapshot, after: Snapshot, directory: str) -> list[ChangeEvent]:
    """Compare two snapshots and return the changes, sorted by path."""
    now = datetime.now()
    events = []

    for path in sorted(before.keys() | after.keys()):
        if path not in before:
            kind = ChangeKind.CREATED
        elif path not in after:
            kind = ChangeKind.DELETED
        elif before[path] != after[path]:
            kind = ChangeKind.MODIFIED
        else:
            continue
        events.append(ChangeEvent(kind=kind, path=path, directory=directory, timestamp=now))

    return events


def watch(
    directories: Iterable[str | Path],
    callback: Callable[[ChangeEvent], None],
    interval: float = 1.0,
    stop: Optional[threading.Event] = None,
    max_cycles: Optional[int] = None,
) -> None:
    """
    Poll directories and report changes until stopped.

    Directories that cannot be read are logged and left out of the watch.

    Args:
        directories: Directories to watch
        callback: Called once per detected change
        interval: Seconds between polls
        stop: Event that ends the loop when set
        max_cycles: Stop after this many polls (None = run until stopped)
    """
    stop = stop or threading.Event()
    snapshots: dict[str, Snapshot] = {}

    for directory in directories:
        key = str(Path(directory).absolute())
        try:
            snapshots[key] = snapshot(key)
        except OSError as e:
            logger.error("Error watching %s: %s", key, e)

    cycles = 0
    while snapshots and not stop.is_set():
        if max_cycles is not None and cycles >= max_cycles:
            break
        stop.wait(interval)
        cycles += 1

        for directory, previous in list(snapshots.items()):
            try:
                current = snapshot(directory)
            except OSError as e:
                logger.error("Stopped watching %s: %s", directory, e)
                del snapshots[directory]
                continue

            for event in diff_snapshots(previous, current, directory):
                callback(event)
            snapshots[directory] = current
