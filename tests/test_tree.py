"""Tests for the change tree and its rendering."""

from branchdiff.git.models import FileChange, FileStatus, ReconciledStats
from branchdiff.report.tree import (
    DirectoryNode,
    FileNode,
    build_tree,
    format_stats,
    render_tree,
)


def _change(path, status=FileStatus.MODIFIED, additions=1, deletions=0, **kwargs):
    return FileChange(path=path, status=status, additions=additions, deletions=deletions, **kwargs)


class TestBuildTree:
    def test_nested_directories(self):
        tree = build_tree([_change("src/a.py"), _change("src/lib/b.py"), _change("README.md")])
        assert list(tree.children) == ["src", "README.md"]
        src = tree.children["src"]
        assert isinstance(src, DirectoryNode)
        assert list(src.children) == ["a.py", "lib"]
        assert isinstance(src.children["lib"].children["b.py"], FileNode)

    def test_every_change_appears_once(self):
        changes = [_change("a/b/c.py"), _change("a/d.py"), _change("e.py")]
        tree = build_tree(changes)
        assert sorted(n.change.path for n in tree.files()) == ["a/b/c.py", "a/d.py", "e.py"]

    def test_file_then_directory_both_kept(self):
        tree = build_tree([_change("docs"), _change("docs/index.md")])
        assert sorted(n.change.path for n in tree.files()) == ["docs", "docs/index.md"]

    def test_directory_then_file_both_kept(self):
        tree = build_tree([
            _change("docs/index.md", FileStatus.DELETED, 0, 3),
            _change("docs", FileStatus.ADDED, 2, 0),
        ])
        assert sorted(n.change.path for n in tree.files()) == ["docs", "docs/index.md"]
        rendered = render_tree(tree)
        assert "🗑️ index.md (+0, -3)" in rendered
        assert "🆕 docs (+2, -0)" in rendered
        assert "📁 docs" in rendered

    def test_empty(self):
        tree = build_tree([])
        assert tree.children == {}
        assert render_tree(tree) == ""


class TestFormatting:
    def test_plain_stats(self):
        assert format_stats(_change("a.py", additions=3, deletions=2)) == "(+3, -2)"

    def test_move_counts_appended(self):
        change = _change(
            "a.py", additions=4, deletions=4,
            reconciled=ReconciledStats(moved_lines=3, modified_moved_lines=1),
        )
        assert format_stats(change) == "(+4, -4, ○3, ●1)"

    def test_render_connectors(self):
        tree = build_tree([
            _change("src/a.py", FileStatus.ADDED, 2, 0),
            _change("src/b.py", FileStatus.DELETED, 0, 5),
            _change("setup.cfg", FileStatus.MODIFIED, 1, 1),
        ])
        assert render_tree(tree).splitlines() == [
            "├── 📁 src",
            "│   ├── 🆕 a.py (+2, -0)",
            "│   └── 🗑️ b.py (+0, -5)",
            "└── 📝 setup.cfg (+1, -1)",
        ]

    def test_rename_shows_origin(self):
        tree = build_tree([
            _change("lib/new.py", FileStatus.RENAMED, 0, 0, old_path="old/orig.py"),
        ])
        assert "📂 new.py ← orig.py (+0, -0)" in render_tree(tree)
