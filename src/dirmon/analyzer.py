"""Analysis entry points for dirmon.

Each function takes a root path and plain parameters, walks the tree once
and returns a report model. None of them read the config store or touch
the filesystem beyond reading it.
"""

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from dirmon.duplicates import bucket_by_size, candidate_buckets, group_by_digest, hash_buckets
from dirmon.models import CleanupReport, DuplicateReport, UsageReport, format_size
from dirmon.rules import classify
from dirmon.usage import aggregate
from dirmon.walker import ensure_root, walk

logger = logging.getLogger(__name__)

TOP_DIRECTORIES = 10
DEFAULT_AGE_DAYS = 90
DEFAULT_SIZE_MB = 100

__all__ = [
    "DEFAULT_AGE_DAYS",
    "DEFAULT_SIZE_MB",
    "TOP_DIRECTORIES",
    "advise_cleanup",
    "analyze_usage",
    "find_duplicates",
    "format_size",
]


def find_duplicates(
    root: str | Path,
    max_workers: int = 4,
    cancel: Optional[threading.Event] = None,
) -> DuplicateReport:
    """
    Find byte-identical files below root.

    Files are bucketed by size first; only buckets with two or more
    non-empty files are hashed.

    Args:
        root: Directory to scan
        max_workers: Parallel hashing threads
        cancel: Optional cancellation event

    Returns:
        DuplicateReport with groups sorted by wasted space

    Raises:
        RootAccessError: If root is missing or unreadable
        ScanCancelled: If cancel was set during the scan
    """
    root_path = ensure_root(root)

    buckets = candidate_buckets(bucket_by_size(walk(root_path, cancel=cancel)))
    logger.debug("%d size buckets to hash under %s", len(buckets), root_path)

    digests, skipped = hash_buckets(buckets, max_workers=max_workers, cancel=cancel)
    if skipped:
        logger.warning("Skipped %d unreadable files under %s", skipped, root_path)

    return DuplicateReport(
        root=str(root_path),
        groups=group_by_digest(buckets, digests),
        skipped=skipped,
    )


def analyze_usage(
    root: str | Path,
    cancel: Optional[threading.Event] = None,
) -> UsageReport:
    """
    Break down disk usage below root by file type and directory.

    Args:
        root: Directory to analyze
        cancel: Optional cancellation event

    Returns:
        UsageReport with the top directories and the exact total

    Raises:
        RootAccessError: If root is missing or unreadable
        ScanCancelled: If cancel was set during the scan
    """
    root_path = ensure_root(root)
    by_type, by_dir, total_bytes = aggregate(walk(root_path, cancel=cancel))

    return UsageReport(
        root=str(root_path),
        by_type=by_type,
        by_dir=by_dir[:TOP_DIRECTORIES],
        total_bytes=total_bytes,
        dir_count_total=len(by_dir),
    )


def advise_cleanup(
    root: str | Path,
    age_threshold_days: int = DEFAULT_AGE_DAYS,
    size_threshold_mb: int = DEFAULT_SIZE_MB,
    now: Optional[datetime] = None,
    cancel: Optional[threading.Event] = None,
) -> CleanupReport:
    """
    Recommend files below root for deletion. Never deletes anything.

    Args:
        root: Directory to analyze
        age_threshold_days: Files not modified for longer are Stale
        size_threshold_mb: Files larger than this are Oversize
        now: Reference time for the Stale rule
        cancel: Optional cancellation event

    Returns:
        CleanupReport with one candidate per matching file

    Raises:
        RootAccessError: If root is missing or unreadable
        ValueError: If a threshold is negative
        ScanCancelled: If cancel was set during the scan
    """
    root_path = ensure_root(root)
    candidates = classify(
        walk(root_path, cancel=cancel),
        age_threshold_days,
        size_threshold_mb,
        now=now,
    )

    return CleanupReport(
        root=str(root_path),
        age_threshold_days=age_threshold_days,
        size_threshold_mb=size_threshold_mb,
        candidates=candidates,
    )
