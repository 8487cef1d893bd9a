"""Duplicate detection: size bucketing, content hashing and digest grouping."""

import hashlib
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Optional

from dirmon.errors import EntryAccessError, ScanCancelled
from dirmon.models import DuplicateGroup, FileRecord

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MiB


def bucket_by_size(records: Iterable[FileRecord]) -> dict[int, list[str]]:
    """
    Group regular files by exact byte size.

    Directories and symlinks are ignored. Paths keep discovery order.

    Args:
        records: Walk output

    Returns:
        Dict mapping size -> list of paths with that size
    """
    buckets: dict[int, list[str]] = {}
    for record in records:
        if record.is_dir or record.is_symlink:
            continue
        buckets.setdefault(record.size, []).append(record.path)
    return buckets


def candidate_buckets(buckets: dict[int, list[str]]) -> dict[int, list[str]]:
    """Keep only buckets worth hashing (non-empty files, 2+ members)."""
    return {size: paths for size, paths in buckets.items() if size > 0 and len(paths) > 1}


def hash_file(
    path: str,
    chunk_size: int = CHUNK_SIZE,
    cancel: Optional[threading.Event] = None,
) -> str:
    """
    Compute the SHA-256 digest of a file without loading it into memory.

    Args:
        path: File to hash
        chunk_size: Bytes read per iteration
        cancel: Optional event, checked between chunks

    Returns:
        Hex digest string

    Raises:
        EntryAccessError: If the file cannot be read
        ScanCancelled: If cancel was set while reading
    """
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                if cancel is not None and cancel.is_set():
                    raise ScanCancelled(f"hashing of {path} cancelled")
                digest.update(chunk)
    except OSError as e:
        raise EntryAccessError(path, e.strerror or str(e)) from e
    return digest.hexdigest()


def hash_buckets(
    buckets: dict[int, list[str]],
    max_workers: int = 4,
    cancel: Optional[threading.Event] = None,
) -> tuple[dict[str, str], int]:
    """
    Hash every file in the given buckets in parallel.

    Args:
        buckets: Candidate buckets (see candidate_buckets)
        max_workers: Number of parallel hashing threads
        cancel: Optional event; when set, pending work is dropped and
            ScanCancelled is raised

    Returns:
        Tuple of (path -> digest, number of files skipped because of read errors)
    """
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")

    paths = [path for members in buckets.values() for path in members]
    digests: dict[str, str] = {}
    skipped = 0

    if not paths:
        return digests, skipped

    if cancel is None:
        cancel = threading.Event()
    executor = ThreadPoolExecutor(max_workers=max_workers)
    try:
        future_to_path = {executor.submit(hash_file, path, CHUNK_SIZE, cancel): path for path in paths}

        for future in as_completed(future_to_path):
            if cancel.is_set():
                raise ScanCancelled("hashing cancelled")

            path = future_to_path[future]
            try:
                digests[path] = future.result()
            except EntryAccessError as e:
                logger.warning("Could not hash %s: %s", path, e.cause)
                skipped += 1
    except KeyboardInterrupt:
        # Stop in-flight workers between chunks
        cancel.set()
        raise
    finally:
        # Pending work is dropped on cancellation or interrupt
        executor.shutdown(wait=True, cancel_futures=True)

    return digests, skipped


def group_by_digest(
    buckets: dict[int, list[str]],
    digests: dict[str, str],
) -> list[DuplicateGroup]:
    """
    Build duplicate groups from hashed buckets.

    Members of each group keep the bucket's discovery order. Groups are
    sorted by wasted bytes (descending), then digest.

    Args:
        buckets: Candidate buckets that were hashed
        digests: path -> digest from hash_buckets (unhashed paths are skipped)

    Returns:
        Groups with two or more members
    """
    groups: list[DuplicateGroup] = []

    for size, paths in buckets.items():
        by_digest: dict[str, list[str]] = {}
        for path in paths:
            digest = digests.get(path)
            if digest is None:
                continue
            by_digest.setdefault(digest, []).append(path)

        for digest, members in by_digest.items():
            if len(members) > 1:
                groups.append(DuplicateGroup(digest=digest, size=size, members=members))

    groups.sort(key=lambda g: (-g.wasted_bytes, g.digest))
    return groups
