"""Disk usage aggregation by file type and directory."""

import os
from typing import Iterable

from dirmon.models import DirStat, FileRecord, TypeStat

NO_EXTENSION = "[no extension]"


def normalize_extension(path: str) -> str:
    """
    Get the lower-cased extension of a path, including the leading dot.

    Only the final suffix counts ("a.tar.gz" -> ".gz"). Dotfiles such as
    ".bashrc" have no extension.
    """
    ext = os.path.splitext(os.path.basename(path))[1].lower()
    return ext or NO_EXTENSION


def _ranked(totals: dict[str, int]) -> list[tuple[str, int]]:
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


def aggregate(records: Iterable[FileRecord]) -> tuple[list[TypeStat], list[DirStat], int]:
    """
    Accumulate file bytes per extension and per immediate parent directory.

    Args:
        records: Walk output (directories are ignored)

    Returns:
        Tuple of (by_type, by_dir, total_bytes). Both lists are sorted by size
        descending, then by key, and are not truncated.
    """
    type_totals: dict[str, int] = {}
    dir_totals: dict[str, int] = {}
    total_bytes = 0

    for record in records:
        if record.is_dir:
            continue

        total_bytes += record.size

        ext = normalize_extension(record.path)
        type_totals[ext] = type_totals.get(ext, 0) + record.size

        parent = os.path.dirname(record.path)
        dir_totals[parent] = dir_totals.get(parent, 0) + record.size

    by_type = [TypeStat(extension=ext, size=size) for ext, size in _ranked(type_totals)]
    by_dir = [DirStat(directory=d, size=size) for d, size in _ranked(dir_totals)]
    return by_type, by_dir, total_bytes
