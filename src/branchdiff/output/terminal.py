"""Rich terminal reporter — summary, change tree, per-file table."""

from __future__ import annotations

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from branchdiff.engine.moves import MODIFIED_MOVED_MARKER, MOVED_MARKER
from branchdiff.git.models import FileStatus
from branchdiff.report.models import ComparisonReport
from branchdiff.report.tree import STATUS_ICON, render_tree

_STATUS_STYLE = {
    FileStatus.ADDED: "bold green",
    FileStatus.MODIFIED: "bold yellow",
    FileStatus.DELETED: "bold red",
    FileStatus.RENAMED: "bold cyan",
}


def _status_pill(status: FileStatus) -> Text:
    icon = STATUS_ICON.get(status, "")
    return Text(f"{icon} {status.value.upper()}", style=_STATUS_STYLE.get(status, ""))


def changes_table(report: ComparisonReport) -> Table:
    table = Table(
        title="Changed files",
        show_lines=False,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Status", width=14)
    table.add_column("File", style="magenta")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    table.add_column(MOVED_MARKER, justify="right", style="blue")
    table.add_column(MODIFIED_MOVED_MARKER, justify="right", style="cyan")

    for change in report.changes:
        name = change.path
        if change.status == FileStatus.RENAMED and change.old_path:
            name = f"{change.old_path} → {change.path}"
        table.add_row(
            _status_pill(change.status),
            name,
            str(change.additions),
            str(change.deletions),
            str(change.reconciled.moved_lines or "-"),
            str(change.reconciled.modified_moved_lines or "-"),
        )
    return table


def render_stats(report: ComparisonReport, *, console: Console | None = None) -> None:
    """Print only the per-file statistics table."""
    console = console or Console(stderr=True)
    if not report.has_changes:
        console.print("[dim]No changed files.[/dim]")
        return
    console.print(changes_table(report))


def render(
    report: ComparisonReport,
    *,
    show_diff: bool = False,
    show_summary: bool = True,
    console: Console | None = None,
) -> None:
    """Print a comparison report to the terminal using Rich."""
    console = console or Console(stderr=True)

    console.print()
    console.print(f"[bold]Comparing[/bold] [magenta]{report.source}[/magenta] "
                  f"[dim]against[/dim] [cyan]{report.base}[/cyan]")

    if not report.has_changes:
        console.print()
        if report.excluded:
            console.print(f"[bold yellow]All {len(report.excluded)} changed file(s) "
                          "match ignore patterns.[/bold yellow]")
        else:
            console.print("[bold green]✅ No changes between the branches.[/bold green]")
        return

    console.print()
    console.print(render_tree(report.tree), markup=False, highlight=False)

    console.print()
    console.print(changes_table(report))

    if report.commits:
        console.print()
        console.print(f"[bold]New commits ({len(report.commits)}):[/bold]")
        for commit in report.commits:
            console.print(f"  [yellow]{commit.hash}[/yellow] {commit.message}", highlight=False)
    elif report.commit_error:
        console.print()
        console.print("[dim]Commit history unavailable.[/dim]")

    if show_diff and report.annotated_diff:
        console.print()
        console.print(Syntax(report.annotated_diff, "diff", word_wrap=True))

    if show_summary:
        _print_summary(console, report)


def _print_summary(console: Console, report: ComparisonReport) -> None:
    summary = report.summary
    console.print()
    console.print(f"[dim]Files changed:[/dim]  {summary.total_files} "
                  f"([green]{summary.files_added} added[/green], "
                  f"[yellow]{summary.files_modified} modified[/yellow], "
                  f"[red]{summary.files_deleted} deleted[/red])")
    console.print(f"[dim]Lines:[/dim]          [green]+{summary.additions}[/green] "
                  f"[red]-{summary.deletions}[/red]")
    console.print(f"[dim]Moved:[/dim]          {summary.moved_lines} "
                  f"(+{summary.modified_moved_lines} modified and moved)")
    console.print(f"[dim]Excluded:[/dim]       {len(report.excluded)}")
    console.print(f"[dim]Duration:[/dim]       {report.duration_ms:.0f}ms")
