"""Tests for the analysis entry points."""

import os
import time
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from dirmon.analyzer import (
    TOP_DIRECTORIES,
    advise_cleanup,
    analyze_usage,
    find_duplicates,
    format_size,
)
from dirmon.duplicates import hash_file
from dirmon.errors import EntryAccessError, RootAccessError
from dirmon.models import CleanupReason


def set_age(path, days: float) -> None:
    """Backdate a file's modification time."""
    ts = time.time() - days * 86400
    os.utime(path, (ts, ts))


class TestFindDuplicates:
    def test_identical_pair_with_same_size_decoy(self, tmp_path):
        """Two identical files and one same-size different file."""
        (tmp_path / "a.txt").write_bytes(b"x" * 100)
        (tmp_path / "b.txt").write_bytes(b"x" * 100)
        (tmp_path / "c.txt").write_bytes(b"y" * 100)

        report = find_duplicates(tmp_path)

        assert len(report.groups) == 1
        group = report.groups[0]
        assert group.members == [str(tmp_path / "a.txt"), str(tmp_path / "b.txt")]
        assert group.wasted_bytes == 100
        assert report.total_wasted == 100
        assert report.skipped == 0

    def test_empty_directory(self, tmp_path):
        report = find_duplicates(tmp_path)
        assert report.groups == []
        assert report.total_wasted == 0

    def test_empty_files_are_not_duplicates(self, tmp_path):
        (tmp_path / "a").touch()
        (tmp_path / "b").touch()
        assert find_duplicates(tmp_path).groups == []

    def test_nested_duplicates(self, tmp_path):
        (tmp_path / "one").mkdir()
        (tmp_path / "two" / "deep").mkdir(parents=True)
        for p in [tmp_path / "one" / "x.bin", tmp_path / "two" / "deep" / "y.bin", tmp_path / "z.bin"]:
            p.write_bytes(b"payload")

        report = find_duplicates(tmp_path, max_workers=2)

        assert len(report.groups) == 1
        assert len(report.groups[0].members) == 3
        assert report.total_wasted == len(b"payload") * 2

    def test_groups_share_size_and_digest(self, tmp_path):
        for i in range(6):
            (tmp_path / f"f{i}").write_bytes(b"ab" * (i % 2 + 1))

        report = find_duplicates(tmp_path)

        for group in report.groups:
            assert len(group.members) >= 2
            assert all(os.path.getsize(m) == group.size for m in group.members)
        assert report.total_wasted == sum(g.wasted_bytes for g in report.groups)

    def test_unreadable_file_is_skipped(self, tmp_path):
        for name in ["a", "b", "c"]:
            (tmp_path / name).write_text("same")
        broken = str(tmp_path / "c")

        def flaky_hash(path, *args):
            if path == broken:
                raise EntryAccessError(path, "Input/output error")
            return hash_file(path, *args)

        with patch("dirmon.duplicates.hash_file", side_effect=flaky_hash):
            report = find_duplicates(tmp_path)

        assert report.skipped == 1
        assert report.groups[0].members == [str(tmp_path / "a"), str(tmp_path / "b")]
        assert report.total_wasted == 4

    def test_missing_root(self, tmp_path):
        with pytest.raises(RootAccessError):
            find_duplicates(tmp_path / "missing")


class TestAnalyzeUsage:
    def test_empty_directory(self, tmp_path):
        report = analyze_usage(tmp_path)
        assert report.total_bytes == 0
        assert report.by_type == []
        assert report.by_dir == []

    def test_breakdown(self, tmp_path):
        (tmp_path / "a.txt").write_bytes(b"1" * 10)
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.PNG").write_bytes(b"2" * 30)

        report = analyze_usage(tmp_path)

        assert report.total_bytes == 40
        assert [(t.extension, t.size) for t in report.by_type] == [(".png", 30), (".txt", 10)]
        assert [(d.directory, d.size) for d in report.by_dir] == [
            (str(tmp_path / "sub"), 30),
            (str(tmp_path), 10),
        ]

    def test_top_directories_truncated_but_total_exact(self, tmp_path):
        for i in range(TOP_DIRECTORIES + 3):
            d = tmp_path / f"d{i:02d}"
            d.mkdir()
            (d / "f.bin").write_bytes(b"x" * (i + 1))

        report = analyze_usage(tmp_path)

        assert len(report.by_dir) == TOP_DIRECTORIES
        assert report.dir_count_total == TOP_DIRECTORIES + 3
        assert report.total_bytes == sum(range(1, TOP_DIRECTORIES + 4))
        assert sum(t.size for t in report.by_type) == report.total_bytes

    def test_idempotent(self, tmp_path):
        (tmp_path / "a.txt").write_text("hello")
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "c.md").write_text("world!")

        assert analyze_usage(tmp_path) == analyze_usage(tmp_path)

    def test_missing_root(self, tmp_path):
        with pytest.raises(RootAccessError):
            analyze_usage(tmp_path / "missing")


class TestAdviseCleanup:
    def test_log_file_flagged_fresh_csv_ignored(self, tmp_path):
        (tmp_path / "report.log").write_text("log line")
        (tmp_path / "data.csv").write_text("a,b,c")

        report = advise_cleanup(tmp_path)

        assert [c.path for c in report.candidates] == [str(tmp_path / "report.log")]
        assert report.candidates[0].reason == CleanupReason.LOG
        assert report.age_threshold_days == 90
        assert report.size_threshold_mb == 100

    def test_stale_csv_becomes_candidate(self, tmp_path):
        csv = tmp_path / "data.csv"
        csv.write_text("a,b,c")
        set_age(csv, 200)

        report = advise_cleanup(tmp_path, age_threshold_days=90)

        assert len(report.candidates) == 1
        assert report.candidates[0].reason == CleanupReason.STALE

    def test_walks_subdirectories(self, tmp_path):
        (tmp_path / "nested" / "deeper").mkdir(parents=True)
        (tmp_path / "nested" / "deeper" / "old.tmp").write_text("x")

        report = advise_cleanup(tmp_path)

        assert [c.name for c in report.candidates] == ["old.tmp"]

    def test_total_savings(self, tmp_path):
        (tmp_path / "a.tmp").write_bytes(b"1" * 10)
        (tmp_path / "b.log").write_bytes(b"2" * 20)
        (tmp_path / "keep.txt").write_bytes(b"3" * 40)

        report = advise_cleanup(tmp_path)

        assert report.total_savings == 30

    def test_injected_now(self, tmp_path):
        (tmp_path / "data.csv").write_text("a,b,c")

        later = datetime.now() + timedelta(days=365)
        report = advise_cleanup(tmp_path, now=later)

        assert report.candidates[0].reason == CleanupReason.STALE

    def test_never_deletes(self, tmp_path):
        f = tmp_path / "junk.tmp"
        f.write_text("x")
        advise_cleanup(tmp_path)
        assert f.exists()

    def test_missing_root(self, tmp_path):
        with pytest.raises(RootAccessError):
            advise_cleanup(tmp_path / "missing")


class TestFormatSize:
    def test_bytes(self):
        assert format_size(500) == "500 B"

    def test_kilobytes(self):
        assert format_size(1536) == "1.5 KB"

    def test_megabytes(self):
        assert format_size(100 * 1024 * 1024) == "100.0 MB"

    def test_gigabytes(self):
        assert format_size(3 * 1024**3) == "3.0 GB"
