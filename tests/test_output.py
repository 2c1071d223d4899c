"""Tests for the report renderers."""

import json

import pytest
import yaml
from rich.console import Console

from branchdiff.git.models import FileChange, FileStatus, ReconciledStats
from branchdiff.output import json_report, markdown, terminal, yaml_report
from branchdiff.report.assembler import compare_branches
from branchdiff.report.models import ComparisonReport


@pytest.fixture
def report(fake_git, sample_diff_reordered, sample_diff_multi) -> ComparisonReport:
    fake_git.name_status_output = "M\tsrc/app.py\nD\tdocs/old.md\n"
    fake_git.complete_diff_output = (
        sample_diff_reordered + sample_diff_multi[sample_diff_multi.index("diff --git a/docs"):]
    )
    fake_git.log_output = "abc1234 Reorder functions\n"
    return compare_branches(fake_git, "feature", "main")


class TestMarkdown:
    def test_sections(self, report):
        text = markdown.render(report)
        assert text.startswith("# Branch comparison")
        assert "**Base branch:** main" in text
        assert "**Compared branch:** feature" in text
        assert "## Legend" in text
        assert "## Summary" in text
        assert "## Change tree" in text
        assert "1. **abc1234** - Reorder functions" in text
        assert "## Detailed file analysis" in text

    def test_tree_in_code_fence(self, report):
        text = markdown.render(report)
        fence = text.split("## Change tree\n\n```\n", 1)[1].split("```", 1)[0]
        assert "📝 app.py (+4, -4, ○3, ●1)" in fence
        assert "🗑️ old.md (+0, -2)" in fence

    def test_annotated_diff_fenced(self, report):
        text = markdown.render(report)
        assert "```diff\n" in text
        assert "○def load():" in text

    def test_stats_note_for_reorganisation(self, report):
        text = markdown.render(report)
        assert "**git reports:** +4/-4 lines" in text
        assert "**after move detection:** +0/-0 lines" in text
        assert "reorganises existing content" in text

    def test_no_diff(self, report):
        text = markdown.render(report, show_diff=False, show_legend=False)
        assert "## Detailed file analysis" not in text
        assert "## Legend" not in text

    def test_max_files_note(self, report):
        text = markdown.render(report, max_files=1)
        assert "Showing the first 1 of 2 changed files" in text
        assert "### 🗑️ docs/old.md" not in text

    def test_no_changes(self):
        text = markdown.render(ComparisonReport(source="feature", base="main"))
        assert "No changes found between the selected branches." in text
        assert "## Change tree" not in text

    def test_rename_details(self):
        change = FileChange(
            path="lib/new.py", status=FileStatus.RENAMED,
            old_path="lib/old.py", similarity=92,
        )
        section = markdown.file_section(change)
        assert "**Status:** Moved/Renamed (92% similar)" in section
        assert "**Moved from:** lib/old.py" in section

    def test_stats_note_thresholds(self):
        small = FileChange(
            path="a.py", status=FileStatus.MODIFIED, additions=10, deletions=10,
            reconciled=ReconciledStats(additions=8, deletions=8, moved_lines=2),
        )
        assert markdown.stats_note(small) is None
        large = FileChange(
            path="a.py", status=FileStatus.MODIFIED, additions=40, deletions=2,
            reconciled=ReconciledStats(additions=30, deletions=2),
        )
        assert markdown.stats_note(large) is not None


class TestStructuredReports:
    def test_json(self, report):
        data = json.loads(json_report.render(report))
        assert data["source"] == "feature"
        assert data["base"] == "main"
        assert data["summary"]["moved_lines"] == 3
        app = data["files"][0]
        assert app["path"] == "src/app.py"
        assert app["reconciled"]["modified_moved_lines"] == 1
        assert "diff" in app
        assert data["commits"] == [{"hash": "abc1234", "message": "Reorder functions"}]

    def test_json_without_diff(self, report):
        data = json.loads(json_report.render(report, include_diff=False))
        assert all("diff" not in f for f in data["files"])

    def test_yaml_matches_json(self, report):
        assert yaml.safe_load(yaml_report.render(report)) == json.loads(json_report.render(report))


class TestTerminal:
    def test_renders_table_and_summary(self, report):
        console = Console(record=True, width=120)
        terminal.render(report, console=console)
        out = console.export_text()
        assert "Changed files" in out
        assert "src/app.py" in out
        assert "abc1234" in out
        assert "Files changed:" in out

    def test_no_changes(self):
        console = Console(record=True, width=120)
        terminal.render(ComparisonReport(source="feature", base="main"), console=console)
        assert "No changes" in console.export_text()

    def test_stats_table_only(self, report):
        console = Console(record=True, width=120)
        terminal.render_stats(report, console=console)
        out = console.export_text()
        assert "docs/old.md" in out
        assert "abc1234" not in out
        assert "Files changed:" not in out
