"""Markdown reporter — the full human- and AI-readable comparison report."""

from __future__ import annotations

from typing import List, Optional

from branchdiff.engine.moves import (
    MODIFIED_MOVED_MARKER,
    MOVED_MARKER,
    is_likely_reorganization,
)
from branchdiff.git.models import FileChange, FileStatus
from branchdiff.report.models import ComparisonReport, Summary
from branchdiff.report.tree import STATUS_ICON, render_tree

_STATUS_TEXT = {
    FileStatus.ADDED: "New",
    FileStatus.MODIFIED: "Modified",
    FileStatus.DELETED: "Deleted",
    FileStatus.RENAMED: "Moved/Renamed",
}


def legend() -> str:
    return "\n".join([
        "## Legend",
        "",
        "- **+** Added line",
        "- **-** Removed line",
        f"- **{MOVED_MARKER}** Moved line (relocated without changes)",
        f"- **{MODIFIED_MOVED_MARKER}** Modified and moved line",
        "- **(space)** Unchanged line (context)",
        "",
    ])


def summary_section(summary: Summary) -> str:
    lines = [
        "## Summary",
        "",
        f"- **Files changed:** {summary.total_files}",
        f"- **Lines added:** {summary.additions}",
        f"- **Lines removed:** {summary.deletions}",
        f"- **Files added:** {summary.files_added}",
        f"- **Files modified:** {summary.files_modified}",
        f"- **Files deleted:** {summary.files_deleted}",
    ]
    if summary.moved_lines:
        lines.append(f"- **Moved lines:** {summary.moved_lines}")
    if summary.modified_moved_lines:
        lines.append(f"- **Modified and moved lines:** {summary.modified_moved_lines}")
    return "\n".join(lines) + "\n"


def commit_section(report: ComparisonReport) -> str:
    lines = ["## Commits (new on compared branch)", ""]
    if report.commit_error:
        lines.append("Could not read the commit history.")
    elif not report.commits:
        lines.append("No new commits on the compared branch.")
    else:
        lines.append(f"**New commits:** {len(report.commits)}")
        lines.append("")
        for index, commit in enumerate(report.commits, start=1):
            lines.append(f"{index}. **{commit.hash}** - {commit.message}")
    return "\n".join(lines) + "\n"


def stats_note(change: FileChange) -> Optional[str]:
    """Explain a significant gap between git's counts and the move-aware counts."""
    reported_add, reported_del = change.additions, change.deletions
    actual_add, actual_del = change.reconciled.additions, change.reconciled.deletions
    add_diff = abs(actual_add - reported_add)
    del_diff = abs(actual_del - reported_del)

    significant_add = add_diff > 5 or (reported_add > 0 and add_diff / reported_add > 0.5)
    significant_del = del_diff > 5 or (reported_del > 0 and del_diff / reported_del > 0.5)
    if not (significant_add or significant_del):
        return None

    lines = [
        "*Note on statistics:*",
        f"- **git reports:** +{reported_add}/-{reported_del} lines",
        f"- **after move detection:** +{actual_add}/-{actual_del} lines",
    ]
    if is_likely_reorganization(change.path, reported_add, reported_del):
        lines.append("- *This file reorganises existing content (reordered lines)*")
        lines.append("- *git counts each moved line as one deletion plus one addition*")
    elif actual_add > reported_add or actual_del > reported_del:
        lines.append("- *The diff includes formatting, whitespace or extra context changes*")
    else:
        lines.append("- *Moved and edited lines are no longer counted as additions and deletions*")
    return "\n".join(lines)


def file_section(change: FileChange) -> str:
    icon = STATUS_ICON.get(change.status, "📄")
    status = _STATUS_TEXT[change.status]
    if change.status == FileStatus.RENAMED and change.similarity is not None:
        status += f" ({change.similarity}% similar)"

    lines = [f"### {icon} {change.path}", "", f"**Status:** {status}"]
    if change.status == FileStatus.RENAMED and change.old_path:
        lines.append(f"**Moved from:** {change.old_path}")
        lines.append(f"**Moved to:** {change.path}")

    counts = f"**Changes:** +{change.additions} lines, -{change.deletions} lines"
    if change.reconciled.moved_lines:
        counts += f", {MOVED_MARKER}{change.reconciled.moved_lines} moved lines"
    if change.reconciled.modified_moved_lines:
        counts += (
            f", {MODIFIED_MOVED_MARKER}{change.reconciled.modified_moved_lines}"
            " modified and moved lines"
        )
    lines.append(counts)
    lines.append("")

    note = stats_note(change)
    if note:
        lines.append(note)
        lines.append("")

    if change.annotated_diff.strip():
        lines.append("```diff")
        lines.append(change.annotated_diff)
        lines.append("```")
    elif change.note:
        lines.append(f"*{change.note[0].upper()}{change.note[1:]}.*")
    lines.append("")
    return "\n".join(lines)


def detail_section(changes: List[FileChange], max_files: int = 0) -> str:
    lines = ["## Detailed file analysis", ""]
    if not changes:
        lines.append("No changed files to analyse.")
        return "\n".join(lines) + "\n"

    shown = changes[:max_files] if max_files else changes
    if len(shown) < len(changes):
        lines.append(f"*Showing the first {len(shown)} of {len(changes)} changed files.*")
        lines.append(f"*Set `max_files_analyzed = {len(changes)}` to see every file.*")
        lines.append("")

    for change in shown:
        lines.append(file_section(change))
        lines.append("---")
        lines.append("")
    return "\n".join(lines)


def render(
    report: ComparisonReport,
    *,
    show_diff: bool = True,
    show_legend: bool = True,
    show_summary: bool = True,
    max_files: int = 0,
) -> str:
    """Return the complete Markdown report."""
    parts = [
        "# Branch comparison",
        "",
        f"**Base branch:** {report.base}",
        f"**Compared branch:** {report.source}",
        "",
    ]
    if report.excluded:
        parts.append(f"*{len(report.excluded)} file(s) excluded by ignore patterns.*")
        parts.append("")
    if show_legend:
        parts.append(legend())

    if not report.has_changes:
        parts.append("## Result")
        parts.append("")
        if report.excluded:
            parts.append("Every changed file was excluded by the configured ignore patterns.")
        else:
            parts.append("No changes found between the selected branches.")
        return "\n".join(parts) + "\n"

    if show_summary:
        parts.append(summary_section(report.summary))
    parts.append("## Change tree")
    parts.append("")
    parts.append("```")
    parts.append(render_tree(report.tree))
    parts.append("```")
    parts.append("")
    parts.append(commit_section(report))
    if show_diff:
        parts.append(detail_section(report.changes, max_files))
    return "\n".join(parts)
