"""Deletion of confirmed cleanup candidates.

The analysis engine only proposes candidates; this module removes them once
the caller has obtained confirmation.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable

from dirmon.models import DeletionResult

logger = logging.getLogger(__name__)


def delete_file(path: str | Path, dry_run: bool = False) -> DeletionResult:
    """
    Delete a single regular file.

    Args:
        path: File to delete
        dry_run: If True, don't actually delete

    Returns:
        DeletionResult; failures are reported in `error`, never raised
    """
    file_path = Path(path)

    if not file_path.exists() and not file_path.is_symlink():
        return DeletionResult(
            path=str(file_path), success=False, error="No such file", dry_run=dry_run
        )

    if file_path.is_dir() and not file_path.is_symlink():
        return DeletionResult(
            path=str(file_path),
            success=False,
            error=f"{file_path} is a directory, not a file",
            dry_run=dry_run,
        )

    try:
        size = file_path.lstat().st_size
        if not dry_run:
            file_path.unlink()
            logger.info("Deleted %s", file_path)
        return DeletionResult(path=str(file_path), bytes_freed=size, dry_run=dry_run)

    except PermissionError as e:
        return DeletionResult(
            path=str(file_path), success=False, error=f"Permission denied: {e}", dry_run=dry_run
        )
    except OSError as e:
        return DeletionResult(
            path=str(file_path), success=False, error=f"OS error: {e}", dry_run=dry_run
        )


def delete_paths(
    paths: Iterable[str | Path],
    dry_run: bool = False,
    progress_callback: Callable[[str, int, int], None] | None = None,
) -> list[DeletionResult]:
    """
    Delete several files, continuing past individual failures.

    Args:
        paths: Files to delete
        dry_run: If True, don't actually delete
        progress_callback: Optional callback(path, current, total)

    Returns:
        One DeletionResult per path, in input order
    """
    path_list = list(paths)
    results = []

    for i, path in enumerate(path_list):
        if progress_callback:
            progress_callback(str(path), i + 1, len(path_list))
        results.append(delete_file(path, dry_run=dry_run))

    return results
