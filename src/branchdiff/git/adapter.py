"""Git subprocess wrapper — branches, name-status, diffs, file contents, logs."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 60) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        # Empty diff is not an error
        if not stderr or "fatal" not in stderr.lower():
            return result.stdout
        raise GitError(f"git error: {stderr}")
    return result.stdout


@dataclass(frozen=True)
class BranchInfo:
    name: str
    is_current: bool = False


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def list_branches(repo_root: Path) -> List[BranchInfo]:
    """Return local branches; the checked-out one is flagged."""
    output = _run_git(["branch", "--no-color"], cwd=repo_root)
    branches: List[BranchInfo] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        branches.append(
            BranchInfo(name=line[2:].strip(), is_current=line.startswith("*"))
        )
    return branches


def branch_exists(repo_root: Path, name: str) -> bool:
    """Return True if *name* resolves to a commit."""
    # --quiet suppresses the fatal message, so the exit status is the answer
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"{name}^{{commit}}"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            timeout=30,
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git rev-parse timed out while verifying {name!r}")
    return result.returncode == 0


def get_name_status(repo_root: Path, base: str, source: str) -> str:
    """Return ``--name-status`` output for changes on *source* since it forked from *base*."""
    return _run_git(
        ["diff", "--find-renames", "--name-status", "--no-color", f"{base}...{source}"],
        cwd=repo_root,
    )


def get_complete_diff(repo_root: Path, base: str, source: str) -> str:
    """Return the unified diff of *source* against its merge base with *base*."""
    return _run_git(
        ["diff", "--no-color", f"{base}...{source}"],
        cwd=repo_root,
        timeout=120,
    )


def get_file_diff(repo_root: Path, base: str, source: str, path: str) -> str:
    """Return the unified diff of a single file between two revisions."""
    return _run_git(
        ["diff", "--no-color", f"{base}..{source}", "--", path],
        cwd=repo_root,
    )


def get_file_content(repo_root: Path, rev: str, path: str) -> str:
    """Return the content of *path* at *rev*. Raises GitError if it does not exist."""
    return _run_git(["show", f"{rev}:{path}"], cwd=repo_root)


def get_file_line_count(repo_root: Path, rev: str, path: str) -> int:
    """Return the number of lines of *path* at *rev*."""
    return len(get_file_content(repo_root, rev, path).splitlines())


def get_commit_history(repo_root: Path, base: str, source: str, max_count: int = 20) -> str:
    """Return ``--oneline`` log of commits on *source* that are not on *base*."""
    return _run_git(
        ["log", "--oneline", "--no-merges", "--no-color",
         f"--max-count={max_count}", f"{base}..{source}"],
        cwd=repo_root,
    )


class GitSource(Protocol):
    """Everything the comparison pipeline needs from version control."""

    def branch_exists(self, name: str) -> bool: ...

    def name_status(self, base: str, source: str) -> str: ...

    def complete_diff(self, base: str, source: str) -> str: ...

    def file_diff(self, base: str, source: str, path: str) -> str: ...

    def file_content(self, rev: str, path: str) -> str: ...

    def file_line_count(self, rev: str, path: str) -> int: ...

    def commit_history(self, base: str, source: str, max_count: int = 20) -> str: ...


class GitRepository:
    """GitSource backed by the git binary, bound to one repository root."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    def branches(self) -> List[BranchInfo]:
        return list_branches(self.repo_root)

    def branch_exists(self, name: str) -> bool:
        return branch_exists(self.repo_root, name)

    def name_status(self, base: str, source: str) -> str:
        return get_name_status(self.repo_root, base, source)

    def complete_diff(self, base: str, source: str) -> str:
        return get_complete_diff(self.repo_root, base, source)

    def file_diff(self, base: str, source: str, path: str) -> str:
        return get_file_diff(self.repo_root, base, source, path)

    def file_content(self, rev: str, path: str) -> str:
        return get_file_content(self.repo_root, rev, path)

    def file_line_count(self, rev: str, path: str) -> int:
        return get_file_line_count(self.repo_root, rev, path)

    def commit_history(self, base: str, source: str, max_count: int = 20) -> str:
        return get_commit_history(self.repo_root, base, source, max_count)
