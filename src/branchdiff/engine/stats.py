"""Per-file addition/deletion counting and the fallback policy for empty stats.

Counts come from hunk bodies only: a ``+`` line inside a hunk is an
addition, a ``-`` line a deletion. When name-status says a file changed
but its diff yields ``(0, 0)``, the counts are approximated:

- added files count every line of the new revision as an addition
- deleted files count every line of the old revision as a deletion
- modified files get a single addition as a minimum-change signal
- renamed files keep ``(0, 0)`` (a pure rename)

A failing content read never propagates; added/deleted files fall back to
``(1, 0)`` / ``(0, 1)``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from branchdiff.git.adapter import GitError, GitSource
from branchdiff.git.diff_parser import DiffParser, is_file_header, is_hunk_header
from branchdiff.git.models import (
    FileChange,
    FileDiffStats,
    FileStatus,
    LineKind,
    LineRecord,
)

logger = logging.getLogger(__name__)


def count_records(records: Iterable[LineRecord]) -> FileDiffStats:
    """Count added and removed records."""
    additions = 0
    deletions = 0
    for record in records:
        if record.kind == LineKind.ADDED:
            additions += 1
        elif record.kind == LineKind.REMOVED:
            deletions += 1
    return FileDiffStats(additions=additions, deletions=deletions)


def extract_stats(diff_text: str) -> Dict[str, FileDiffStats]:
    """Return raw stats per post-change path for a (multi-file) diff.

    A path appearing twice keeps the counts of its last occurrence.
    """
    stats: Dict[str, FileDiffStats] = {}
    for file_diff in DiffParser(diff_text).parse():
        stats[file_diff.path] = count_records(file_diff.records)
        logger.debug(
            "%s: +%d -%d",
            file_diff.path, stats[file_diff.path].additions, stats[file_diff.path].deletions,
        )
    return stats


def analyze_diff_stats(diff_text: str) -> FileDiffStats:
    """Count changes in a single diff text.

    When the text has content but no hunk header at all, every ``+``/``-``
    line except file headers is counted instead.
    """
    records = [r for fd in DiffParser(diff_text).parse() for r in fd.records]
    stats = count_records(records)

    has_hunk = any(is_hunk_header(line) for line in diff_text.splitlines())
    if has_hunk or not diff_text.strip():
        return stats

    logger.warning("No hunks found but diff has content, counting +/- lines directly")
    additions = 0
    deletions = 0
    for line in diff_text.splitlines():
        if is_file_header(line):
            continue
        if line.startswith("+"):
            additions += 1
        elif line.startswith("-"):
            deletions += 1
    return FileDiffStats(additions=additions, deletions=deletions)


def fallback_stats(
    change: FileChange,
    source: GitSource,
    base: str,
    compare: str,
) -> FileDiffStats:
    """Approximate counts for a changed file whose diff produced ``(0, 0)``."""
    if change.status == FileStatus.ADDED:
        try:
            count = source.file_line_count(compare, change.path)
        except GitError as exc:
            logger.warning("Failed to read %s at %s: %s", change.path, compare, exc)
            return FileDiffStats(additions=1, deletions=0)
        return FileDiffStats(additions=count or 1, deletions=0)

    if change.status == FileStatus.DELETED:
        try:
            count = source.file_line_count(base, change.path)
        except GitError as exc:
            logger.warning("Failed to read %s at %s: %s", change.path, base, exc)
            return FileDiffStats(additions=0, deletions=1)
        return FileDiffStats(additions=0, deletions=count or 1)

    if change.status == FileStatus.MODIFIED:
        # TODO: find out which diffs produce (0, 0) for modified files; this
        # minimum is kept for compatibility until then
        logger.warning("Modified file %s has 0,0 stats - forcing minimum", change.path)
        return FileDiffStats(additions=1, deletions=0)

    return FileDiffStats()


def apply_stats(
    changes: List[FileChange],
    diff_text: str,
    source: GitSource,
    base: str,
    compare: str,
) -> List[FileChange]:
    """Fill in additions/deletions on *changes* from *diff_text*, in place.

    Every change keeps its place in the list, even when no count could be
    determined.
    """
    stats_map = extract_stats(diff_text)
    logger.debug("Found stats for %d files in complete diff", len(stats_map))

    for change in changes:
        stats = stats_map.get(change.path, FileDiffStats())
        change.raw_stats = stats
        if stats.is_empty:
            stats = fallback_stats(change, source, base, compare)
        change.additions = stats.additions
        change.deletions = stats.deletions
        logger.debug(
            "%s (%s): +%d, -%d",
            change.path, change.status.value, change.additions, change.deletions,
        )
    return changes
