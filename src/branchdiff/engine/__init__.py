"""Diff reconciliation engine — stats, move detection, manual synthesis."""

from branchdiff.engine.moves import (
    MODIFIED_MOVED_MARKER,
    MOVED_MARKER,
    MoveResult,
    annotate,
    are_lines_related,
    is_likely_reorganization,
    reconcile,
    reconcile_records,
)
from branchdiff.engine.stats import (
    analyze_diff_stats,
    apply_stats,
    count_records,
    extract_stats,
    fallback_stats,
)
from branchdiff.engine.synthesizer import align, synthesize

__all__ = [
    "MODIFIED_MOVED_MARKER",
    "MOVED_MARKER",
    "MoveResult",
    "align",
    "analyze_diff_stats",
    "annotate",
    "apply_stats",
    "are_lines_related",
    "count_records",
    "extract_stats",
    "fallback_stats",
    "is_likely_reorganization",
    "reconcile",
    "reconcile_records",
    "synthesize",
]
