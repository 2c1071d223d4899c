"""JSON reporter for scripts and AI tooling."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from branchdiff import __version__
from branchdiff.report.models import ComparisonReport


def to_dict(report: ComparisonReport, *, include_diff: bool = True) -> Dict[str, Any]:
    """Convert a ComparisonReport to a JSON-serialisable dict."""
    files: List[Dict[str, Any]] = []
    for c in report.changes:
        files.append({
            "path": c.path,
            "status": c.status.value,
            "additions": c.additions,
            "deletions": c.deletions,
            "reconciled": {
                "additions": c.reconciled.additions,
                "deletions": c.reconciled.deletions,
                "moved_lines": c.reconciled.moved_lines,
                "modified_moved_lines": c.reconciled.modified_moved_lines,
            },
            **({"old_path": c.old_path} if c.old_path else {}),
            **({"similarity": c.similarity} if c.similarity is not None else {}),
            **({"note": c.note} if c.note else {}),
            **({"diff": c.annotated_diff} if include_diff and c.annotated_diff else {}),
        })

    s = report.summary
    return {
        "version": __version__,
        "source": report.source,
        "base": report.base,
        "summary": {
            "total_files": s.total_files,
            "additions": s.additions,
            "deletions": s.deletions,
            "files_added": s.files_added,
            "files_modified": s.files_modified,
            "files_deleted": s.files_deleted,
            "moved_lines": s.moved_lines,
            "modified_moved_lines": s.modified_moved_lines,
        },
        "files": files,
        "commits": [{"hash": c.hash, "message": c.message} for c in report.commits],
        **({"commit_error": report.commit_error} if report.commit_error else {}),
        "excluded": report.excluded,
        "duration_ms": report.duration_ms,
    }


def render(report: ComparisonReport, *, include_diff: bool = True) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(report, include_diff=include_diff), indent=2, ensure_ascii=False)
