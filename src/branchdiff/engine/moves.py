"""Move detection — exact moves, modified moves, and the annotated diff.

Exact moves are matched by trimmed content: for every distinct line text
present on both sides, ``min(removed, added)`` occurrences are moved.
Occurrences are consumed in encounter order; position plays no role.
Blank lines never count as moves.

Modified moves pair the remaining removed and added lines whose common
prefix plus common suffix covers at least 60 % of the shorter line, and
only when that line is at least 10 characters long. Pairing is
one-to-one, first come first served.

Both kinds of move are subtracted from the reported additions and
deletions, so reconciled counts never exceed the raw ones.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set, Tuple

from branchdiff.git.diff_parser import is_hunk_header, parse_line_records
from branchdiff.git.models import LineKind, LineRecord, ReconciledStats

logger = logging.getLogger(__name__)

MOVED_MARKER = "○"
MODIFIED_MOVED_MARKER = "●"

RELATED_THRESHOLD = 0.6
RELATED_MIN_LENGTH = 10

_REORGANIZATION_PRONE_FILES = frozenset({
    "package.json",
    "package-lock.json",
    "pnpm-lock.yaml",
    "yarn.lock",
    "composer.json",
    "requirements.txt",
    "Pipfile.lock",
    "poetry.lock",
    "Gemfile",
    "go.mod",
    "Cargo.toml",
})

_CONFIG_FILE_MARKERS = (
    ".eslintrc",
    "eslint.config.",
    "prettier.config.",
    "tsconfig.json",
    "webpack.config.",
    "vite.config.",
    "rollup.config.",
    "setup.cfg",
    "tox.ini",
)


@dataclass
class MoveResult:
    """Outcome of move detection over one file's line records."""

    stats: ReconciledStats
    moved_removed: Set[int] = field(default_factory=set)  # source indices
    moved_added: Set[int] = field(default_factory=set)
    modified_pairs: List[Tuple[int, int]] = field(default_factory=list)  # (removed, added)
    skipped: bool = False  # pure addition, nothing analysed


def common_prefix_length(a: str, b: str) -> int:
    i = 0
    limit = min(len(a), len(b))
    while i < limit and a[i] == b[i]:
        i += 1
    return i


def common_suffix_length(a: str, b: str) -> int:
    i = 0
    limit = min(len(a), len(b))
    while i < limit and a[-1 - i] == b[-1 - i]:
        i += 1
    return i


def are_lines_related(line1: str, line2: str) -> bool:
    """Return True if two lines look like edits of one another."""
    min_length = min(len(line1), len(line2))
    if min_length < RELATED_MIN_LENGTH:
        return False
    shared = common_prefix_length(line1, line2) + common_suffix_length(line1, line2)
    return shared / min_length >= RELATED_THRESHOLD


def _match_exact(
    removed: Sequence[LineRecord],
    added: Sequence[LineRecord],
) -> Tuple[Set[int], Set[int], int]:
    removed_counts = Counter(r.text.strip() for r in removed if r.text.strip())
    added_counts = Counter(r.text.strip() for r in added if r.text.strip())

    budget: Dict[str, int] = {
        content: min(count, added_counts[content])
        for content, count in removed_counts.items()
        if content in added_counts
    }
    moved_total = sum(budget.values())

    def _consume(records: Sequence[LineRecord]) -> Set[int]:
        remaining = dict(budget)
        taken: Set[int] = set()
        for record in records:
            key = record.text.strip()
            if remaining.get(key, 0) > 0:
                remaining[key] -= 1
                taken.add(record.source_index)
        return taken

    return _consume(removed), _consume(added), moved_total


def _match_modified(
    removed: Sequence[LineRecord],
    added: Sequence[LineRecord],
) -> List[Tuple[int, int]]:
    pairs: List[Tuple[int, int]] = []
    used: Set[int] = set()
    for r in removed:
        if not r.text.strip():
            continue
        for a in added:
            if a.source_index in used or not a.text.strip():
                continue
            if are_lines_related(r.text, a.text):
                pairs.append((r.source_index, a.source_index))
                used.add(a.source_index)
                break
    return pairs


def reconcile_records(records: Sequence[LineRecord]) -> MoveResult:
    """Run move detection over one file's hunk line records."""
    removed = [r for r in records if r.kind == LineKind.REMOVED]
    added = [r for r in records if r.kind == LineKind.ADDED]

    if not removed:
        return MoveResult(stats=ReconciledStats(additions=len(added)), skipped=True)

    moved_removed, moved_added, moved_total = _match_exact(removed, added)

    pairs = _match_modified(
        [r for r in removed if r.source_index not in moved_removed],
        [a for a in added if a.source_index not in moved_added],
    )
    # a pair is one removed and one added line; it counts once, not twice
    modified_moved = len(pairs)

    stats = ReconciledStats(
        additions=len(added) - moved_total - modified_moved,
        deletions=len(removed) - moved_total - modified_moved,
        moved_lines=moved_total,
        modified_moved_lines=modified_moved,
    )
    logger.debug(
        "Real: +%d, -%d, moved: %d, modified-moved: %d",
        stats.additions, stats.deletions, stats.moved_lines, stats.modified_moved_lines,
    )
    return MoveResult(
        stats=stats,
        moved_removed=moved_removed,
        moved_added=moved_added,
        modified_pairs=pairs,
    )


def annotate(diff_text: str, result: MoveResult) -> str:
    """Rewrite *diff_text* with move markers.

    Moved removed lines are re-prefixed with ``○``; their added
    counterparts are dropped; hunk headers are stripped. Everything else
    passes through unchanged.
    """
    if result.skipped:
        return diff_text

    out: List[str] = []
    for idx, line in enumerate(diff_text.splitlines()):
        if idx in result.moved_removed:
            out.append(MOVED_MARKER + line[1:])
        elif idx in result.moved_added:
            continue
        elif is_hunk_header(line):
            continue
        else:
            out.append(line)
    return "\n".join(out)


def reconcile(diff_text: str) -> Tuple[ReconciledStats, str]:
    """Return move-aware stats and the annotated diff for one file's diff."""
    result = reconcile_records(parse_line_records(diff_text))
    return result.stats, annotate(diff_text, result)


def is_likely_reorganization(file_path: str, additions: int, deletions: int) -> bool:
    """Guess whether a file's changes are mostly reordered lines."""
    file_name = file_path.rsplit("/", 1)[-1]

    if file_name in _REORGANIZATION_PRONE_FILES:
        return True
    if any(marker in file_name for marker in _CONFIG_FILE_MARKERS):
        return True

    if additions == deletions and additions <= 10:
        return True

    if additions > 0 and deletions > 0:
        ratio = min(additions, deletions) / max(additions, deletions)
        if ratio > 0.7 and max(additions, deletions) <= 20:
            return True

    return False
