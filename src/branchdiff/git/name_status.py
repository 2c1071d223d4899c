"""Parse ``git diff --name-status`` output into FileChange records."""

from __future__ import annotations

import logging
import re
from typing import List

from branchdiff.git.models import FileChange, FileStatus

logger = logging.getLogger(__name__)

_STATUS_MAP = {
    "A": FileStatus.ADDED,
    "M": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
}

_SCORE_RE = re.compile(r"^[RC](\d+)")


def parse_name_status(output: str) -> List[FileChange]:
    """Return one FileChange per recognised name-status line.

    ``R<score>`` lines become renames carrying the old path and similarity;
    ``C<score>`` (copies) are reported as added files at the destination.
    Unknown status codes (type changes, unmerged entries) are skipped.
    """
    changes: List[FileChange] = []

    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        code = parts[0].strip()

        if code.startswith("R"):
            if len(parts) < 3:
                logger.debug("Skipping truncated rename entry: %r", line)
                continue
            m = _SCORE_RE.match(code)
            changes.append(
                FileChange(
                    path=parts[2],
                    status=FileStatus.RENAMED,
                    old_path=parts[1],
                    similarity=int(m.group(1)) if m else None,
                )
            )
        elif code.startswith("C"):
            if len(parts) < 3:
                logger.debug("Skipping truncated copy entry: %r", line)
                continue
            changes.append(FileChange(path=parts[2], status=FileStatus.ADDED))
        elif code in _STATUS_MAP:
            path = "\t".join(parts[1:])
            if not path:
                continue
            changes.append(FileChange(path=path, status=_STATUS_MAP[code]))
        else:
            logger.debug("Skipping unsupported status %r for %r", code, line)

    return changes
