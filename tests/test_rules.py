"""Tests for cleanup rules."""

from datetime import datetime, timedelta

import pytest

from dirmon.models import CleanupReason, FileRecord
from dirmon.rules import RULES, classify, classify_record, is_log_file, is_temp_file, make_context

NOW = datetime(2025, 6, 1, 12, 0, 0)
MB = 1024 * 1024


def make_record(name: str, size: int = 1000, age_days: float = 1, is_dir: bool = False) -> FileRecord:
    """Helper to create a record of a given age relative to NOW."""
    return FileRecord(
        path=f"/data/{name}",
        is_dir=is_dir,
        size=size,
        modified_at=NOW - timedelta(days=age_days),
    )


def reason_for(record: FileRecord, age: int = 90, size_mb: int = 100):
    candidate = classify_record(record, make_context(age, size_mb, now=NOW))
    return candidate.reason if candidate else None


class TestRuleOrder:
    def test_fixed_priority(self):
        assert [r.reason for r in RULES] == [
            CleanupReason.TEMPORARY,
            CleanupReason.LOG,
            CleanupReason.STALE,
            CleanupReason.OVERSIZE,
        ]

    def test_temporary_beats_stale(self):
        record = make_record("build.tmp", size=10, age_days=1000)
        assert reason_for(record) == CleanupReason.TEMPORARY

    def test_temporary_beats_log(self):
        record = make_record("debug_cache.log")
        assert reason_for(record) == CleanupReason.TEMPORARY

    def test_log_beats_oversize(self):
        record = make_record("server.log", size=500 * MB)
        assert reason_for(record) == CleanupReason.LOG

    def test_stale_beats_oversize(self):
        record = make_record("movie.mkv", size=500 * MB, age_days=365)
        assert reason_for(record) == CleanupReason.STALE


class TestTemporaryRule:
    @pytest.mark.parametrize(
        "name",
        ["x.tmp", "X.TMP", "a.temp", "doc.bak", "~lock.docx", "temp_upload", "TEMP_file", "thumbcache.db"],
    )
    def test_matches(self, name):
        assert is_temp_file(name)

    @pytest.mark.parametrize("name", ["notes.txt", "template.html", "backup.zip"])
    def test_does_not_match(self, name):
        assert not is_temp_file(name)


class TestLogRule:
    @pytest.mark.parametrize("name", ["app.log", "APP.LOG", "old.log.gz", "run.logs", "Debug_output.txt"])
    def test_matches(self, name):
        assert is_log_file(name)

    @pytest.mark.parametrize("name", ["login.html", "catalog.csv", "blog.md"])
    def test_does_not_match(self, name):
        assert not is_log_file(name)


class TestStaleRule:
    def test_old_file_is_stale(self):
        candidate = classify_record(make_record("data.csv", age_days=100), make_context(90, 100, now=NOW))
        assert candidate.reason == CleanupReason.STALE
        assert candidate.detail == "Not modified for 100 days"

    def test_exactly_at_threshold_is_not_stale(self):
        assert reason_for(make_record("data.csv", age_days=90)) is None

    def test_empty_file_is_never_stale(self):
        assert reason_for(make_record("empty.dat", size=0, age_days=1000)) is None

    def test_zero_day_threshold(self):
        assert reason_for(make_record("data.csv", age_days=0.5), age=0) == CleanupReason.STALE


class TestOversizeRule:
    def test_large_file(self):
        candidate = classify_record(make_record("disk.img", size=200 * MB), make_context(90, 100, now=NOW))
        assert candidate.reason == CleanupReason.OVERSIZE
        assert candidate.detail == "Large file (200.0 MB)"

    def test_exactly_at_threshold_is_not_oversize(self):
        assert reason_for(make_record("disk.img", size=100 * MB)) is None

    def test_recent_medium_file_is_not_candidate(self):
        assert reason_for(make_record("video.mp4", size=50 * MB, age_days=10)) is None


class TestClassify:
    def test_directories_are_never_candidates(self):
        records = [make_record("cache", size=0, age_days=1000, is_dir=True)]
        assert classify(records, 90, 100, now=NOW) == []

    def test_keeps_input_order_and_metadata(self):
        records = [
            make_record("b.log", size=20),
            make_record("keep.txt", size=5),
            make_record("a.tmp", size=10),
        ]

        candidates = classify(records, 90, 100, now=NOW)

        assert [c.path for c in candidates] == ["/data/b.log", "/data/a.tmp"]
        assert candidates[0].size == 20
        assert candidates[0].modified_at == records[0].modified_at
        assert candidates[0].detail == "Log file"
        assert candidates[1].detail == "Temporary file"

    def test_each_file_counted_once(self):
        # Old, large and temporary: still a single candidate
        records = [make_record("huge.bak", size=300 * MB, age_days=400)]
        candidates = classify(records, 90, 100, now=NOW)
        assert len(candidates) == 1
        assert sum(c.size for c in candidates) == 300 * MB

    def test_deterministic(self):
        records = [make_record(f"f{i}.{ext}", size=i * MB, age_days=i * 10)
                   for i, ext in enumerate(["txt", "log", "tmp", "bin"] * 5)]
        assert classify(records, 90, 100, now=NOW) == classify(records, 90, 100, now=NOW)

    def test_negative_thresholds_rejected(self):
        with pytest.raises(ValueError):
            classify([], -1, 100)
        with pytest.raises(ValueError):
            classify([], 90, -5)
