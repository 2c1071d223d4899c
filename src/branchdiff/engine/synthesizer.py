"""Manual diff synthesis from two full file contents.

Used when git produces no usable hunks for a file that is known to
differ. The alignment is greedy, not a longest-common-subsequence: each
new line is paired with the first unmatched identical old line, and the
walk below turns those pairings into context/added/removed lines. On
files with many repeated lines (closing braces, blank lines) the result
can look misaligned even though it still shows that content differs.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from branchdiff.git.models import LineKind

NO_CHANGES_NOTE = "# No visible differences found"


def find_line_matches(
    old_lines: List[str],
    new_lines: List[str],
) -> Tuple[Dict[int, int], Dict[int, int]]:
    """Pair each new line with the first not-yet-matched identical old line.

    Returns ``(new_to_old, old_to_new)`` index maps.
    """
    new_to_old: Dict[int, int] = {}
    old_to_new: Dict[int, int] = {}

    for new_idx, line in enumerate(new_lines):
        for old_idx, old_line in enumerate(old_lines):
            if old_line == line and old_idx not in old_to_new:
                new_to_old[new_idx] = old_idx
                old_to_new[old_idx] = new_idx
                break

    return new_to_old, old_to_new


def align(old_lines: List[str], new_lines: List[str]) -> List[Tuple[LineKind, str]]:
    """Return the sequence of (kind, line) operations turning old into new."""
    new_to_old, old_to_new = find_line_matches(old_lines, new_lines)
    ops: List[Tuple[LineKind, str]] = []

    old_idx = 0
    new_idx = 0
    while new_idx < len(new_lines) or old_idx < len(old_lines):
        new_match = new_to_old.get(new_idx) if new_idx < len(new_lines) else None
        old_match = old_to_new.get(old_idx) if old_idx < len(old_lines) else None

        if new_idx >= len(new_lines):
            ops.append((LineKind.REMOVED, old_lines[old_idx]))
            old_idx += 1
        elif old_idx >= len(old_lines):
            ops.append((LineKind.ADDED, new_lines[new_idx]))
            new_idx += 1
        elif new_match == old_idx and old_match == new_idx:
            ops.append((LineKind.CONTEXT, new_lines[new_idx]))
            new_idx += 1
            old_idx += 1
        elif new_match is None:
            ops.append((LineKind.ADDED, new_lines[new_idx]))
            new_idx += 1
        elif old_match is None or new_match > old_idx:
            ops.append((LineKind.REMOVED, old_lines[old_idx]))
            old_idx += 1
        else:
            ops.append((LineKind.ADDED, new_lines[new_idx]))
            new_idx += 1

    return ops


_PREFIX = {
    LineKind.CONTEXT: " ",
    LineKind.ADDED: "+",
    LineKind.REMOVED: "-",
}


def synthesize(old_content: str, new_content: str, file_path: str) -> str:
    """Build a single-hunk unified diff for *file_path* from two contents."""
    old_lines = old_content.split("\n")
    new_lines = new_content.split("\n")

    out = [
        f"--- a/{file_path}",
        f"+++ b/{file_path}",
        f"@@ -1,{len(old_lines)} +1,{len(new_lines)} @@",
    ]

    changed = False
    for kind, line in align(old_lines, new_lines):
        if kind != LineKind.CONTEXT:
            changed = True
        out.append(_PREFIX[kind] + line)

    if not changed:
        out.append(NO_CHANGES_NOTE)
        out.append(f"# Old: {len(old_lines)} lines, New: {len(new_lines)} lines")
        out.append("# Possible causes: binary differences, encoding issues, or very large files")

    return "\n".join(out) + "\n"
