"""Report building — change tree, summary, comparison pipeline."""

from branchdiff.report.assembler import (
    ComparisonError,
    ComparisonReportAssembler,
    compare_branches,
)
from branchdiff.report.models import (
    Commit,
    ComparisonReport,
    Summary,
    calculate_summary,
    parse_commit_log,
)
from branchdiff.report.tree import DirectoryNode, FileNode, build_tree, render_tree

__all__ = [
    "Commit",
    "ComparisonError",
    "ComparisonReport",
    "ComparisonReportAssembler",
    "DirectoryNode",
    "FileNode",
    "Summary",
    "build_tree",
    "calculate_summary",
    "compare_branches",
    "parse_commit_log",
    "render_tree",
]
