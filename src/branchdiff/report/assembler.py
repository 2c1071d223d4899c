"""Comparison pipeline — turns two branch names into a ComparisonReport.

Per file: raw counts from the complete diff (with fallbacks), then the
file's own diff text, then move detection. A failure while handling one
file is logged and leaves that file with whatever counts it already had;
it never aborts the report.
"""

from __future__ import annotations

import logging
import time
from fnmatch import fnmatch
from typing import List, Optional, Tuple

from branchdiff.config.schema import BranchDiffConfig
from branchdiff.engine.moves import annotate, reconcile_records
from branchdiff.engine.stats import apply_stats, count_records
from branchdiff.engine.synthesizer import synthesize
from branchdiff.git.adapter import GitError, GitSource
from branchdiff.git.diff_parser import parse_line_records, split_file_diffs
from branchdiff.git.models import FileChange, FileStatus, ReconciledStats
from branchdiff.git.name_status import parse_name_status
from branchdiff.report.models import ComparisonReport, calculate_summary, parse_commit_log
from branchdiff.report.tree import build_tree

logger = logging.getLogger(__name__)

NO_VISIBLE_DIFFERENCES = "no visible differences found"
IDENTICAL_CONTENT = "contents are identical; only mode or line-ending changes"
TOO_LARGE = "diff too large for move detection"


class ComparisonError(Exception):
    """Raised when a comparison cannot be started (unknown or identical branches)."""


def is_ignored(path: str, patterns: List[str]) -> bool:
    basename = path.rsplit("/", 1)[-1]
    return any(fnmatch(path, p) or fnmatch(basename, p) for p in patterns)


class ComparisonReportAssembler:
    """Build a ComparisonReport from a GitSource.

    Usage::

        assembler = ComparisonReportAssembler(GitRepository(root), config)
        report = assembler.assemble("feature/login", "main")
    """

    def __init__(self, source: GitSource, config: Optional[BranchDiffConfig] = None) -> None:
        self.git = source
        self.config = config or BranchDiffConfig()

    def validate(self, compare: str, base: str) -> None:
        if compare == base:
            raise ComparisonError("Cannot compare a branch with itself")
        for name in (base, compare):
            if not self.git.branch_exists(name):
                raise ComparisonError(f"Branch {name!r} does not exist")

    def assemble(self, compare: str, base: Optional[str] = None) -> ComparisonReport:
        start = time.perf_counter()
        base = base or self.config.compare.base
        self.validate(compare, base)

        changes = parse_name_status(self.git.name_status(base, compare))
        ignore = self.config.ignore.files
        excluded = [c.path for c in changes if is_ignored(c.path, ignore)]
        changes = [c for c in changes if not is_ignored(c.path, ignore)]
        logger.info("%d changed files (%d excluded)", len(changes), len(excluded))

        try:
            complete_diff = self.git.complete_diff(base, compare)
        except GitError as exc:
            logger.warning("Could not read complete diff, using fallback counts: %s", exc)
            complete_diff = ""

        apply_stats(changes, complete_diff, self.git, base, compare)
        file_diffs = split_file_diffs(complete_diff)

        annotated: List[str] = []
        for change in changes:
            text = self._analyse_file(change, file_diffs.get(change.path, ""), base, compare)
            if text:
                annotated.append(text)

        report = ComparisonReport(
            source=compare,
            base=base,
            changes=changes,
            summary=calculate_summary(changes),
            tree=build_tree(changes),
            excluded=excluded,
            annotated_diff="\n".join(annotated),
        )

        try:
            log = self.git.commit_history(base, compare, self.config.compare.max_commits)
            report.commits = parse_commit_log(log)
        except GitError as exc:
            logger.warning("Could not read commit history: %s", exc)
            report.commit_error = str(exc)

        report.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        return report

    # ---- per file ----

    def _analyse_file(self, change: FileChange, diff_text: str, base: str, compare: str) -> str:
        """Reconcile one file in place and return its annotated diff."""
        if not parse_line_records(diff_text):
            diff_text, note = self._recover_diff(change, base, compare)
            if note:
                change.note = note

        records = parse_line_records(diff_text)
        raw = count_records(records)
        if change.raw_stats.is_empty:
            change.raw_stats = raw

        if not records:
            change.reconciled = ReconciledStats()
            if change.status != FileStatus.RENAMED:
                change.note = change.note or NO_VISIBLE_DIFFERENCES
            change.annotated_diff = diff_text
            return diff_text

        if not self.config.compare.detect_moves:
            change.reconciled = ReconciledStats(additions=raw.additions, deletions=raw.deletions)
            change.annotated_diff = diff_text
            return diff_text

        if len(diff_text.encode("utf-8")) > self.config.compare.max_diff_bytes:
            logger.warning("%s: diff exceeds %d bytes, skipping move detection",
                           change.path, self.config.compare.max_diff_bytes)
            change.reconciled = ReconciledStats(additions=raw.additions, deletions=raw.deletions)
            change.note = TOO_LARGE
            change.annotated_diff = ""
            return ""

        result = reconcile_records(records)
        change.reconciled = result.stats
        change.annotated_diff = annotate(diff_text, result)
        return change.annotated_diff

    def _recover_diff(self, change: FileChange, base: str, compare: str) -> Tuple[str, Optional[str]]:
        """Find usable diff text for a file missing from the complete diff."""
        try:
            text = self.git.file_diff(base, compare, change.path)
        except GitError as exc:
            logger.warning("Per-file diff failed for %s: %s", change.path, exc)
            text = ""
        if parse_line_records(text):
            return text, None

        if change.status not in (FileStatus.MODIFIED, FileStatus.RENAMED):
            return text, None

        old_path = change.old_path or change.path
        old_content = self._read(base, old_path)
        new_content = self._read(compare, change.path)
        if old_content == new_content:
            return "", IDENTICAL_CONTENT if change.status == FileStatus.MODIFIED else None

        logger.info("Synthesising diff for %s", change.path)
        return synthesize(old_content, new_content, change.path), None

    def _read(self, rev: str, path: str) -> str:
        try:
            return self.git.file_content(rev, path)
        except GitError as exc:
            logger.warning("Failed to get content for %s from %s: %s", path, rev, exc)
            return ""


def compare_branches(
    source: GitSource,
    compare: str,
    base: Optional[str] = None,
    config: Optional[BranchDiffConfig] = None,
) -> ComparisonReport:
    """Convenience wrapper around ComparisonReportAssembler.assemble."""
    return ComparisonReportAssembler(source, config).assemble(compare, base)
