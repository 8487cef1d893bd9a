"""Cleanup rules for dirmon.

Rules are evaluated in order and the first match wins:
Temporary -> Log -> Stale -> Oversize.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from dirmon.models import CleanupCandidate, CleanupReason, FileRecord, format_size

TEMP_SUFFIXES = (".tmp", ".temp", ".bak")
TEMP_PREFIXES = ("~", "temp_")
TEMP_MARKER = "cache"

LOG_SUFFIXES = (".log", ".log.gz", ".logs")
LOG_MARKER = "debug"

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class RuleContext:
    """Thresholds and reference time shared by all rules."""

    now: datetime
    age_threshold: timedelta
    size_threshold_bytes: int


@dataclass(frozen=True)
class CleanupRule:
    """A single cleanup heuristic."""

    reason: CleanupReason
    matches: Callable[[FileRecord, RuleContext], bool]
    describe: Callable[[FileRecord, RuleContext], str]


def is_temp_file(name: str) -> bool:
    """Check if a file name looks like a temporary or cache file."""
    lower = name.lower()
    return lower.endswith(TEMP_SUFFIXES) or lower.startswith(TEMP_PREFIXES) or TEMP_MARKER in lower


def is_log_file(name: str) -> bool:
    """Check if a file name looks like a log file."""
    lower = name.lower()
    return lower.endswith(LOG_SUFFIXES) or LOG_MARKER in lower


def _age(record: FileRecord, ctx: RuleContext) -> timedelta:
    return ctx.now - record.modified_at


def _is_stale(record: FileRecord, ctx: RuleContext) -> bool:
    return _age(record, ctx) > ctx.age_threshold and record.size > 0


def _is_oversize(record: FileRecord, ctx: RuleContext) -> bool:
    return record.size > ctx.size_threshold_bytes


RULES: tuple[CleanupRule, ...] = (
    CleanupRule(
        reason=CleanupReason.TEMPORARY,
        matches=lambda record, ctx: is_temp_file(record.name),
        describe=lambda record, ctx: "Temporary file",
    ),
    CleanupRule(
        reason=CleanupReason.LOG,
        matches=lambda record, ctx: is_log_file(record.name),
        describe=lambda record, ctx: "Log file",
    ),
    CleanupRule(
        reason=CleanupReason.STALE,
        matches=_is_stale,
        describe=lambda record, ctx: f"Not modified for {_age(record, ctx).days} days",
    ),
    CleanupRule(
        reason=CleanupReason.OVERSIZE,
        matches=_is_oversize,
        describe=lambda record, ctx: f"Large file ({format_size(record.size)})",
    ),
)


def make_context(
    age_threshold_days: int,
    size_threshold_mb: int,
    now: Optional[datetime] = None,
) -> RuleContext:
    """
    Build the rule context, validating thresholds.

    Raises:
        ValueError: If a threshold is negative
    """
    if age_threshold_days < 0:
        raise ValueError("age_threshold_days must be >= 0")
    if size_threshold_mb < 0:
        raise ValueError("size_threshold_mb must be >= 0")

    return RuleContext(
        now=now or datetime.now(),
        age_threshold=timedelta(days=age_threshold_days),
        size_threshold_bytes=size_threshold_mb * BYTES_PER_MB,
    )


def classify_record(record: FileRecord, ctx: RuleContext) -> CleanupCandidate | None:
    """Apply the rules to one record; return a candidate for the first match."""
    if record.is_dir:
        return None

    for rule in RULES:
        if rule.matches(record, ctx):
            return CleanupCandidate(
                path=record.path,
                size=record.size,
                modified_at=record.modified_at,
                reason=rule.reason,
                detail=rule.describe(record, ctx),
            )
    return None


def classify(
    records: Iterable[FileRecord],
    age_threshold_days: int,
    size_threshold_mb: int,
    now: Optional[datetime] = None,
) -> list[CleanupCandidate]:
    """
    Classify records into cleanup candidates.

    Pure function over metadata: no filesystem access.

    Args:
        records: Walk output
        age_threshold_days: Files older than this are Stale
        size_threshold_mb: Files larger than this are Oversize
        now: Reference time (defaults to datetime.now())

    Returns:
        Candidates in input order; files matching no rule are omitted
    """
    ctx = make_context(age_threshold_days, size_threshold_mb, now)
    candidates = []
    for record in records:
        candidate = classify_record(record, ctx)
        if candidate is not None:
            candidates.append(candidate)
    return candidates
