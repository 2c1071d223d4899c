"""Data models for diff parsing and per-file change records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class LineKind(str, Enum):
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True, slots=True)
class LineRecord:
    """A single classified line inside a hunk."""

    kind: LineKind
    text: str  # content without the leading +/-/space marker
    source_index: int  # 0-based index of the raw line in the parsed diff text


@dataclass
class Hunk:
    """One ``@@ -a,b +c,d @@`` block and its body lines."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: List[LineRecord] = field(default_factory=list)

    @property
    def added(self) -> List[LineRecord]:
        return [r for r in self.lines if r.kind == LineKind.ADDED]

    @property
    def removed(self) -> List[LineRecord]:
        return [r for r in self.lines if r.kind == LineKind.REMOVED]


@dataclass
class FileDiff:
    """All hunks of one file inside a (possibly multi-file) diff."""

    path: str
    old_path: Optional[str] = None
    hunks: List[Hunk] = field(default_factory=list)
    is_binary: bool = False

    @property
    def records(self) -> List[LineRecord]:
        return [r for h in self.hunks for r in h.lines]


@dataclass(frozen=True)
class FileDiffStats:
    """Raw, move-unaware counts taken from hunk markers."""

    additions: int = 0
    deletions: int = 0

    @property
    def is_empty(self) -> bool:
        return self.additions == 0 and self.deletions == 0


@dataclass(frozen=True)
class ReconciledStats:
    """Move-aware counts for one file."""

    additions: int = 0
    deletions: int = 0
    moved_lines: int = 0
    modified_moved_lines: int = 0


@dataclass
class FileChange:
    """One file touched between two revisions.

    Created from name-status output, then enriched in place with counts,
    reconciled stats and the annotated diff.
    """

    path: str
    status: FileStatus
    additions: int = 0
    deletions: int = 0
    old_path: Optional[str] = None  # set on renames
    similarity: Optional[int] = None  # percentage, renames only
    reconciled: ReconciledStats = field(default_factory=ReconciledStats)
    raw_stats: FileDiffStats = field(default_factory=FileDiffStats)
    annotated_diff: str = ""
    note: Optional[str] = None  # e.g. "no visible differences found"
