"""Tests for raw stat extraction and the fallback policy."""

from branchdiff.engine.stats import (
    analyze_diff_stats,
    apply_stats,
    extract_stats,
    fallback_stats,
)
from branchdiff.git.models import FileChange, FileDiffStats, FileStatus


class TestExtractStats:
    def test_counts_per_file(self, sample_diff_multi):
        stats = extract_stats(sample_diff_multi)
        assert stats["src/app.py"] == FileDiffStats(additions=1, deletions=1)
        assert stats["docs/old.md"] == FileDiffStats(additions=0, deletions=2)

    def test_added_file(self, sample_diff_added):
        assert extract_stats(sample_diff_added)["hello.py"] == FileDiffStats(3, 0)

    def test_binary_and_mode_only_are_empty(self, sample_diff_binary, sample_diff_mode_only):
        assert extract_stats(sample_diff_binary)["image.png"].is_empty
        assert extract_stats(sample_diff_mode_only)["script.sh"].is_empty

    def test_repeated_path_keeps_last(self):
        diff = (
            "diff --git a/x.py b/x.py\n@@ -1 +1,2 @@\n+a\n+b\n"
            "diff --git a/x.py b/x.py\n@@ -1 +1 @@\n-c\n"
        )
        assert extract_stats(diff)["x.py"] == FileDiffStats(additions=0, deletions=1)

    def test_comment_line_resembling_header(self):
        diff = "diff --git a/q.sql b/q.sql\n@@ -1,3 +1,1 @@\n--- a/b comment\n-select 1;\n+select 2;\n"
        assert extract_stats(diff)["q.sql"] == FileDiffStats(additions=1, deletions=2)

    def test_empty_diff(self):
        assert extract_stats("") == {}


class TestAnalyzeDiffStats:
    def test_hunk_counts(self, sample_diff_no_newline):
        assert analyze_diff_stats(sample_diff_no_newline) == FileDiffStats(1, 1)

    def test_headerless_fallback_counts_markers(self):
        text = "--- a/f.txt\n+++ b/f.txt\n+one\n+two\n-three\n"
        assert analyze_diff_stats(text) == FileDiffStats(additions=2, deletions=1)

    def test_blank_text(self):
        assert analyze_diff_stats("   \n") == FileDiffStats()


class TestFallbackStats:
    def test_modified_forces_one_addition(self, fake_git):
        change = FileChange(path="a.py", status=FileStatus.MODIFIED)
        assert fallback_stats(change, fake_git, "main", "feature") == FileDiffStats(1, 0)

    def test_added_uses_new_line_count(self, fake_git):
        fake_git.contents[("feature", "new.py")] = "a\nb\nc\n"
        change = FileChange(path="new.py", status=FileStatus.ADDED)
        assert fallback_stats(change, fake_git, "main", "feature") == FileDiffStats(3, 0)

    def test_added_empty_file_counts_one(self, fake_git):
        fake_git.contents[("feature", "empty.py")] = ""
        change = FileChange(path="empty.py", status=FileStatus.ADDED)
        assert fallback_stats(change, fake_git, "main", "feature") == FileDiffStats(1, 0)

    def test_deleted_uses_old_line_count(self, fake_git):
        fake_git.contents[("main", "gone.txt")] = "1\n2\n"
        change = FileChange(path="gone.txt", status=FileStatus.DELETED)
        assert fallback_stats(change, fake_git, "main", "feature") == FileDiffStats(0, 2)

    def test_read_failure_falls_back_to_one(self, fake_git):
        added = FileChange(path="missing.py", status=FileStatus.ADDED)
        deleted = FileChange(path="missing.py", status=FileStatus.DELETED)
        assert fallback_stats(added, fake_git, "main", "feature") == FileDiffStats(1, 0)
        assert fallback_stats(deleted, fake_git, "main", "feature") == FileDiffStats(0, 1)

    def test_rename_stays_zero(self, fake_git):
        change = FileChange(path="b.py", status=FileStatus.RENAMED, old_path="a.py")
        assert fallback_stats(change, fake_git, "main", "feature").is_empty


class TestApplyStats:
    def test_every_change_kept_in_order(self, fake_git, sample_diff_multi):
        changes = [
            FileChange(path="src/app.py", status=FileStatus.MODIFIED),
            FileChange(path="untouched.py", status=FileStatus.MODIFIED),
            FileChange(path="docs/old.md", status=FileStatus.DELETED),
        ]
        result = apply_stats(changes, sample_diff_multi, fake_git, "main", "feature")
        assert [c.path for c in result] == ["src/app.py", "untouched.py", "docs/old.md"]
        assert (result[0].additions, result[0].deletions) == (1, 1)
        assert (result[1].additions, result[1].deletions) == (1, 0)
        assert result[1].raw_stats.is_empty
        assert (result[2].additions, result[2].deletions) == (0, 2)
