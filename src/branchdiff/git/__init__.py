"""Git interface layer — adapter, diff parsing, name-status, models."""

from branchdiff.git.adapter import (
    BranchInfo,
    GitError,
    GitRepository,
    GitSource,
    get_repo_root,
)
from branchdiff.git.diff_parser import (
    DiffParser,
    parse_diff,
    parse_line_records,
    split_file_diffs,
)
from branchdiff.git.models import (
    FileChange,
    FileDiff,
    FileDiffStats,
    FileStatus,
    Hunk,
    LineKind,
    LineRecord,
    ReconciledStats,
)
from branchdiff.git.name_status import parse_name_status

__all__ = [
    "BranchInfo",
    "DiffParser",
    "FileChange",
    "FileDiff",
    "FileDiffStats",
    "FileStatus",
    "GitError",
    "GitRepository",
    "GitSource",
    "Hunk",
    "LineKind",
    "LineRecord",
    "ReconciledStats",
    "get_repo_root",
    "parse_diff",
    "parse_line_records",
    "parse_name_status",
    "split_file_diffs",
]
