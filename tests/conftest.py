"""Shared test fixtures — sample diffs, a fake git source, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Set, Tuple

import pytest

from branchdiff.git.adapter import GitError


@pytest.fixture
def sample_diff_added() -> str:
    """A diff that adds a new file."""
    return textwrap.dedent("""\
        diff --git a/hello.py b/hello.py
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/hello.py
        @@ -0,0 +1,3 @@
        +def greet(name):
        +    return f"Hello, {name}!"
        +
    """)


@pytest.fixture
def sample_diff_reordered() -> str:
    """A diff where two functions swap places and one call is renamed."""
    return textwrap.dedent("""\
        diff --git a/src/app.py b/src/app.py
        index 1234567..abcdef0 100644
        --- a/src/app.py
        +++ b/src/app.py
        @@ -1,6 +1,6 @@
         import os
        -def load():
        -    return read_config()
        +def save():
        +    write_config()
        -def save():
        -    write_config()
        +def load():
        +    return read_config_file()
    """)


@pytest.fixture
def sample_diff_multi() -> str:
    """A two-file diff: one modification, one deletion."""
    return textwrap.dedent("""\
        diff --git a/src/app.py b/src/app.py
        index 1234567..abcdef0 100644
        --- a/src/app.py
        +++ b/src/app.py
        @@ -1,3 +1,3 @@
         import os
        -x = 1
        +x = 2
         print(x)
        diff --git a/docs/old.md b/docs/old.md
        deleted file mode 100644
        index abc1234..0000000
        --- a/docs/old.md
        +++ /dev/null
        @@ -1,2 +0,0 @@
        -# Old
        -text
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A diff with a binary file."""
    return textwrap.dedent("""\
        diff --git a/image.png b/image.png
        new file mode 100644
        Binary files /dev/null and b/image.png differ
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A diff with a renamed file."""
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 97%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,0 +2,1 @@
        +# New line added after rename
    """)


@pytest.fixture
def sample_diff_mode_only() -> str:
    """A diff with only a file mode change."""
    return textwrap.dedent("""\
        diff --git a/script.sh b/script.sh
        old mode 100644
        new mode 100755
    """)


@pytest.fixture
def sample_diff_no_newline() -> str:
    """A diff with a 'No newline at end of file' marker."""
    return textwrap.dedent("""\
        diff --git a/data.txt b/data.txt
        index 0000000..abc1234 100644
        --- a/data.txt
        +++ b/data.txt
        @@ -1 +1 @@
        -old final line
        \\ No newline at end of file
        +new final line
        \\ No newline at end of file
    """)


@dataclass
class FakeGitSource:
    """In-memory GitSource for pipeline tests."""

    branches: Set[str] = field(default_factory=lambda: {"main", "feature"})
    name_status_output: str = ""
    complete_diff_output: str = ""
    file_diffs: Dict[str, str] = field(default_factory=dict)
    contents: Dict[Tuple[str, str], str] = field(default_factory=dict)
    log_output: str = ""
    fail_complete_diff: bool = False
    fail_log: bool = False

    def branch_exists(self, name: str) -> bool:
        return name in self.branches

    def name_status(self, base: str, source: str) -> str:
        return self.name_status_output

    def complete_diff(self, base: str, source: str) -> str:
        if self.fail_complete_diff:
            raise GitError("git error: diff exploded")
        return self.complete_diff_output

    def file_diff(self, base: str, source: str, path: str) -> str:
        return self.file_diffs.get(path, "")

    def file_content(self, rev: str, path: str) -> str:
        try:
            return self.contents[(rev, path)]
        except KeyError:
            raise GitError(f"git error: fatal: path '{path}' does not exist in '{rev}'")

    def file_line_count(self, rev: str, path: str) -> int:
        return len(self.file_content(rev, path).splitlines())

    def commit_history(self, base: str, source: str, max_count: int = 20) -> str:
        if self.fail_log:
            raise GitError("git error: fatal: bad revision")
        return "\n".join(self.log_output.splitlines()[:max_count])


@pytest.fixture
def fake_git() -> FakeGitSource:
    return FakeGitSource()


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with a ``main`` branch."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    # Initial commit
    (tmp_path / "README.md").write_text("# Test\n")
    (tmp_path / "app.py").write_text(
        "import os\n"
        "\n"
        "def load():\n"
        "    return read_config()\n"
        "\n"
        "def save():\n"
        "    write_config()\n"
    )
    (tmp_path / "notes.txt").write_text("one\ntwo\n")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-m", "init")
    _git(tmp_path, "branch", "-M", "main")
    return tmp_path


@pytest.fixture
def feature_repo(tmp_git_repo: Path) -> Path:
    """``tmp_git_repo`` plus a ``feature`` branch that reorders, adds and deletes."""
    repo = tmp_git_repo
    _git(repo, "checkout", "-b", "feature")
    (repo / "app.py").write_text(
        "import os\n"
        "\n"
        "def save():\n"
        "    write_config()\n"
        "\n"
        "def load():\n"
        "    return read_config()\n"
    )
    (repo / "src").mkdir()
    (repo / "src" / "new.py").write_text("a = 1\nb = 2\n")
    (repo / "notes.txt").unlink()
    _git(repo, "add", "-A")
    _git(repo, "commit", "-m", "Reorder app and add new module")
    _git(repo, "checkout", "main")
    return repo
