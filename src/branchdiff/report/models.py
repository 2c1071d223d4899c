"""Report data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from branchdiff.git.models import FileChange, FileStatus
from branchdiff.report.tree import DirectoryNode


@dataclass
class Commit:
    hash: str
    message: str


@dataclass
class Summary:
    total_files: int = 0
    additions: int = 0
    deletions: int = 0
    files_added: int = 0
    files_modified: int = 0  # renamed files count as modified
    files_deleted: int = 0
    moved_lines: int = 0
    modified_moved_lines: int = 0


@dataclass
class ComparisonReport:
    """Complete result of comparing *source* against *base*."""

    source: str
    base: str
    changes: List[FileChange] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    tree: DirectoryNode = field(default_factory=lambda: DirectoryNode(name=""))
    commits: List[Commit] = field(default_factory=list)
    commit_error: Optional[str] = None
    excluded: List[str] = field(default_factory=list)
    annotated_diff: str = ""
    duration_ms: float = 0.0

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)


def calculate_summary(changes: List[FileChange]) -> Summary:
    """Sum per-file counts and count files by status."""
    summary = Summary(total_files=len(changes))
    for change in changes:
        summary.additions += change.additions
        summary.deletions += change.deletions
        summary.moved_lines += change.reconciled.moved_lines
        summary.modified_moved_lines += change.reconciled.modified_moved_lines
        if change.status == FileStatus.ADDED:
            summary.files_added += 1
        elif change.status in (FileStatus.MODIFIED, FileStatus.RENAMED):
            summary.files_modified += 1
        elif change.status == FileStatus.DELETED:
            summary.files_deleted += 1
    return summary


def parse_commit_log(output: str) -> List[Commit]:
    """Parse ``git log --oneline`` output."""
    commits: List[Commit] = []
    for line in output.strip().splitlines():
        if not line.strip():
            continue
        hash_, _, message = line.partition(" ")
        commits.append(Commit(hash=hash_, message=message))
    return commits
