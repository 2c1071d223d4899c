"""Unified diff parser — splits raw diff text into files, hunks and line records.

Only lines inside a hunk become LineRecords. Everything else (file
headers, index lines, mode changes, rename metadata, comment lines) is
metadata or noise and never counts as an addition or deletion.

A line starting with ``@@`` that does not parse as a hunk header closes
the current hunk; its body is skipped until the next recognisable marker.

While a hunk still expects body lines (per its header counts), lines
that look like ``--- a/...`` or ``+++ b/...`` are content, not headers.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Generator, List, Optional

from branchdiff.git.models import FileDiff, Hunk, LineKind, LineRecord

logger = logging.getLogger(__name__)

# --- Regex patterns for diff parsing ---

_DIFF_HEADER_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")
_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@"
)
_BINARY_RE = re.compile(r"^Binary files .* and .* differ$")
_RENAME_FROM_RE = re.compile(r"^rename from (.+)$")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_NO_NEWLINE_RE = re.compile(r"^\\")
_FILE_HEADER_OLD = re.compile(r"^--- (?:a/(.*)|/dev/null)")
_FILE_HEADER_NEW = re.compile(r"^\+\+\+ (?:b/(.*)|/dev/null)")


def is_hunk_header(line: str) -> bool:
    return line.startswith("@@")


def is_file_header(line: str) -> bool:
    """True for ``--- a/x`` / ``+++ b/x`` lines, which are never content."""
    return bool(_FILE_HEADER_OLD.match(line) or _FILE_HEADER_NEW.match(line))


class DiffParser:
    """Parse unified diff text into FileDiff objects.

    Usage::

        for file_diff in DiffParser(diff_text).parse():
            for hunk in file_diff.hunks:
                ...

    Several files may be concatenated in one text; each ``diff --git``
    header starts a new FileDiff keyed by its post-change path. A diff
    without a ``diff --git`` header (a single-file patch) still parses:
    the path comes from the ``+++ b/...`` header when present.
    """

    def __init__(self, diff_text: str) -> None:
        self._lines = diff_text.splitlines()

    def parse(self) -> Generator[FileDiff, None, None]:
        current: Optional[FileDiff] = None
        hunk: Optional[Hunk] = None
        pending_path: Optional[str] = None
        pending_old: Optional[str] = None
        # lines of the current hunk body still expected on each side
        old_left = 0
        new_left = 0

        for idx, raw_line in enumerate(self._lines):
            # --- diff --git header → new file context ---
            m = _DIFF_HEADER_RE.match(raw_line)
            if m:
                if current is not None:
                    yield current
                current = FileDiff(path=m.group(2), old_path=m.group(1))
                hunk = None
                continue

            # --- Hunk header ---
            if is_hunk_header(raw_line):
                hm = _HUNK_HEADER_RE.match(raw_line)
                if hm is None:
                    logger.debug("Skipping malformed hunk header at line %d: %r", idx, raw_line[:80])
                    hunk = None
                    continue
                if current is None:
                    current = FileDiff(path=pending_path or "", old_path=pending_old)
                hunk = Hunk(
                    old_start=int(hm.group(1)),
                    old_count=int(hm.group(2)) if hm.group(2) is not None else 1,
                    new_start=int(hm.group(3)),
                    new_count=int(hm.group(4)) if hm.group(4) is not None else 1,
                )
                current.hunks.append(hunk)
                old_left, new_left = hunk.old_count, hunk.new_count
                continue

            # --- File headers (--- a/ and +++ b/), unless still inside a hunk body ---
            in_body = hunk is not None and (old_left > 0 or new_left > 0)
            if not in_body and is_file_header(raw_line):
                hunk = None
                old_m = _FILE_HEADER_OLD.match(raw_line)
                if old_m:
                    pending_old = old_m.group(1)
                    continue
                new_m = _FILE_HEADER_NEW.match(raw_line)
                pending_path = (new_m.group(1) if new_m else None) or pending_old
                if current is not None and current.hunks:
                    # a second single-file patch follows without a git header
                    yield current
                    current = None
                elif current is not None and not current.path:
                    current.path = pending_path or ""
                continue

            if hunk is None:
                if current is not None:
                    self._apply_metadata(current, raw_line)
                continue

            # --- "\ No newline at end of file" → skip ---
            if _NO_NEWLINE_RE.match(raw_line):
                continue

            # --- Content lines ---
            if raw_line.startswith("+"):
                hunk.lines.append(LineRecord(LineKind.ADDED, raw_line[1:], idx))
                new_left -= 1
            elif raw_line.startswith("-"):
                hunk.lines.append(LineRecord(LineKind.REMOVED, raw_line[1:], idx))
                old_left -= 1
            elif raw_line.startswith(" "):
                hunk.lines.append(LineRecord(LineKind.CONTEXT, raw_line[1:], idx))
                old_left -= 1
                new_left -= 1
            elif raw_line == "":
                # some tools strip the single space of blank context lines
                hunk.lines.append(LineRecord(LineKind.CONTEXT, "", idx))
                old_left -= 1
                new_left -= 1
            # anything else (comments, garbage) is not part of the hunk body

        if current is not None:
            yield current

    @staticmethod
    def _apply_metadata(file_diff: FileDiff, line: str) -> None:
        """Record rename and binary markers found between file header and hunks."""
        if (rm := _RENAME_FROM_RE.match(line)):
            file_diff.old_path = rm.group(1)
        elif (rt := _RENAME_TO_RE.match(line)):
            file_diff.path = rt.group(1)
        elif _BINARY_RE.match(line):
            file_diff.is_binary = True


def parse_diff(diff_text: str) -> List[FileDiff]:
    """Parse *diff_text* and return every FileDiff it contains."""
    return list(DiffParser(diff_text).parse())


def split_file_diffs(diff_text: str) -> Dict[str, str]:
    """Split a multi-file git diff into per-file texts keyed by post-change path."""
    chunks: List[List[str]] = []
    for line in diff_text.splitlines():
        if _DIFF_HEADER_RE.match(line) or not chunks:
            chunks.append([])
        chunks[-1].append(line)

    by_path: Dict[str, str] = {}
    for chunk in chunks:
        text = "\n".join(chunk)
        for file_diff in DiffParser(text).parse():
            if file_diff.path:
                by_path[file_diff.path] = text
    return by_path


def parse_line_records(diff_text: str) -> List[LineRecord]:
    """Return the hunk line records of *diff_text*, across all files, in order."""
    return [record for file_diff in parse_diff(diff_text) for record in file_diff.records]
