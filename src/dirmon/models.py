"""Data models for dirmon."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (binary units, 1 KB = 1024 B)."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    value = float(size_bytes)
    for unit in "KMGTP":
        value /= 1024
        if value < 1024:
            break
    return f"{value:.1f} {unit}B"


class FileRecord(BaseModel):
    """A single entry produced by walking a directory tree."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Absolute path of the entry")
    is_dir: bool = Field(False, description="Whether the entry is a directory")
    is_symlink: bool = Field(False, description="Whether the entry is a symbolic link")
    size: int = Field(0, description="Size in bytes")
    modified_at: datetime = Field(..., description="Last modification time")

    @property
    def name(self) -> str:
        """Base name of the entry."""
        return Path(self.path).name

    @property
    def size_human(self) -> str:
        """Human-readable size string (binary units)."""
        return format_size(self.size)


class DuplicateGroup(BaseModel):
    """Files sharing both byte size and content digest."""

    model_config = ConfigDict(frozen=True)

    digest: str = Field(..., description="Hex content digest shared by all members")
    size: int = Field(..., description="Size in bytes of every member")
    members: list[str] = Field(default_factory=list, description="Paths, first-seen first")

    @property
    def wasted_bytes(self) -> int:
        """Bytes that could be reclaimed by keeping a single copy."""
        return self.size * (len(self.members) - 1)

    @property
    def short_digest(self) -> str:
        return self.digest[:8]


class DuplicateReport(BaseModel):
    """Result of duplicate detection over a directory tree."""

    root: str = Field(..., description="Root directory that was scanned")
    groups: list[DuplicateGroup] = Field(default_factory=list)
    skipped: int = Field(0, description="Files that could not be hashed")

    @property
    def total_wasted(self) -> int:
        """Total reclaimable bytes across all groups."""
        return sum(g.wasted_bytes for g in self.groups)

    @property
    def duplicate_file_count(self) -> int:
        return sum(len(g.members) for g in self.groups)


class TypeStat(BaseModel):
    """Cumulative bytes for one file extension."""

    model_config = ConfigDict(frozen=True)

    extension: str = Field(..., description="Lower-cased extension or '[no extension]'")
    size: int = Field(0, description="Total bytes")


class DirStat(BaseModel):
    """Cumulative bytes of files directly inside one directory."""

    model_config = ConfigDict(frozen=True)

    directory: str = Field(..., description="Absolute directory path")
    size: int = Field(0, description="Total bytes")


class UsageReport(BaseModel):
    """Disk usage breakdown for a directory tree."""

    root: str = Field(..., description="Root directory that was analyzed")
    by_type: list[TypeStat] = Field(default_factory=list)
    by_dir: list[DirStat] = Field(default_factory=list, description="Largest directories")
    total_bytes: int = Field(0, description="Exact total of all file bytes")
    dir_count_total: int = Field(0, description="Directories with files, before truncation")

    def percent_of_total(self, size_bytes: int) -> float:
        """Share of the total as a percentage."""
        return (size_bytes / self.total_bytes) * 100 if self.total_bytes > 0 else 0


class CleanupReason(str, Enum):
    """Why a file is recommended for cleanup."""

    TEMPORARY = "temporary"
    LOG = "log"
    STALE = "stale"
    OVERSIZE = "oversize"


class CleanupCandidate(BaseModel):
    """A file recommended for deletion."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Absolute file path")
    size: int = Field(..., description="Size in bytes")
    modified_at: datetime = Field(..., description="Last modification time")
    reason: CleanupReason = Field(..., description="First matching rule")
    detail: str = Field(..., description="Human-readable reason")

    @property
    def name(self) -> str:
        return Path(self.path).name


class CleanupReport(BaseModel):
    """Cleanup recommendations for a directory tree."""

    root: str = Field(..., description="Root directory that was analyzed")
    age_threshold_days: int = Field(..., description="Stale threshold in days")
    size_threshold_mb: int = Field(..., description="Oversize threshold in MB")
    candidates: list[CleanupCandidate] = Field(default_factory=list)

    @property
    def total_savings(self) -> int:
        """Total bytes freed if every candidate were deleted."""
        return sum(c.size for c in self.candidates)

    def by_reason(self, reason: CleanupReason) -> list[CleanupCandidate]:
        return [c for c in self.candidates if c.reason == reason]


class DeletionResult(BaseModel):
    """Result of deleting a single file."""

    path: str = Field(..., description="Path that was deleted")
    bytes_freed: int = Field(0, description="Bytes freed")
    success: bool = Field(True, description="Whether deletion succeeded")
    error: Optional[str] = Field(None, description="Error message if failed")
    dry_run: bool = Field(False, description="Whether this was a dry run")


class ChangeKind(str, Enum):
    """Kind of filesystem change seen by the monitor."""

    CREATED = "CREATED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"


class ChangeEvent(BaseModel):
    """A single change detected between two directory snapshots."""

    kind: ChangeKind
    path: str = Field(..., description="Path that changed")
    directory: str = Field(..., description="Watched directory containing the path")
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def name(self) -> str:
        return Path(self.path).name


class MonitorConfig(BaseModel):
    """Persisted list of monitored directories."""

    monitored_dirs: list[str] = Field(default_factory=list)
