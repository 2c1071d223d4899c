"""branchdiff CLI — Typer application with compare, stats, branches, synth and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from branchdiff import __version__

app = typer.Typer(
    name="branchdiff",
    help="Compare git branches with move-aware change statistics.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _setup_logging(verbose: bool = False, debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=debug, rich_tracebacks=debug)],
        force=True,
    )


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from branchdiff.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load(repo_root: Path, config: Optional[str]):
    from branchdiff.config.loader import ConfigError, load_config

    try:
        return load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _run_comparison(repo_root: Path, cfg, source: str, base: Optional[str]):
    from branchdiff.git.adapter import GitError, GitRepository
    from branchdiff.report.assembler import ComparisonError, ComparisonReportAssembler

    assembler = ComparisonReportAssembler(GitRepository(repo_root), cfg)
    try:
        return assembler.assemble(source, base)
    except ComparisonError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


# ── compare ───────────────────────────────────────────────────────────────────


@app.command()
def compare(
    source: str = typer.Argument(..., help="Branch to compare"),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Base branch (default from config)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .branchdiff.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | markdown | json | yaml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    no_diff: bool = typer.Option(False, "--no-diff", help="Leave annotated diffs out of the report"),
    max_files: Optional[int] = typer.Option(None, "--max-files", min=0, help="Detailed analysis for the first N files only"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output with timing"),
) -> None:
    """Compare SOURCE against the base branch and print a report."""
    from branchdiff.config.schema import OUTPUT_FORMATS
    from branchdiff.output import json_report, markdown, terminal, yaml_report

    _setup_logging(verbose, debug)
    repo_root = _resolve_repo_root()
    cfg = _load(repo_root, config)

    # --- CLI overrides ---
    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if no_diff:
        cfg.output.show_diff = False
    if max_files is not None:
        cfg.compare.max_files_analyzed = max_files

    if verbose or debug:
        console.print(f"[dim]Repo root: {repo_root}[/dim]")
        console.print(f"[dim]Base branch: {base or cfg.compare.base}[/dim]")

    report = _run_comparison(repo_root, cfg, source, base)

    if debug:
        console.print(f"[dim]Comparison duration: {report.duration_ms:.0f}ms[/dim]")

    # --- Output ---
    report_text: Optional[str] = None
    fmt = cfg.output.format

    if fmt == "terminal":
        terminal.render(report, show_diff=cfg.output.show_diff, show_summary=cfg.output.show_summary)
    elif fmt == "markdown":
        report_text = markdown.render(
            report,
            show_diff=cfg.output.show_diff,
            show_legend=cfg.output.show_legend,
            show_summary=cfg.output.show_summary,
            max_files=cfg.compare.max_files_analyzed,
        )
    elif fmt == "json":
        report_text = json_report.render(report, include_diff=cfg.output.show_diff)
    elif fmt == "yaml":
        report_text = yaml_report.render(report, include_diff=cfg.output.show_diff)

    if output:
        if report_text is None:
            # terminal output goes to the console, the file gets the markdown report
            report_text = markdown.render(
                report,
                show_diff=cfg.output.show_diff,
                show_legend=cfg.output.show_legend,
                show_summary=cfg.output.show_summary,
                max_files=cfg.compare.max_files_analyzed,
            )
        Path(output).write_text(report_text, encoding="utf-8")
        console.print(f"[green]✓[/green] Report written to {output}")
    elif report_text is not None:
        print(report_text)

    raise typer.Exit(code=0)


# ── stats ─────────────────────────────────────────────────────────────────────


@app.command()
def stats(
    source: str = typer.Argument(..., help="Branch to compare"),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Base branch (default from config)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .branchdiff.toml"),
) -> None:
    """Print the per-file statistics table only."""
    from branchdiff.output import terminal

    _setup_logging()
    repo_root = _resolve_repo_root()
    cfg = _load(repo_root, config)
    report = _run_comparison(repo_root, cfg, source, base)
    terminal.render_stats(report, console=console)


# ── branches ──────────────────────────────────────────────────────────────────


@app.command()
def branches() -> None:
    """List local branches; the current one is marked."""
    from branchdiff.git.adapter import GitError, list_branches

    repo_root = _resolve_repo_root()
    try:
        found = list_branches(repo_root)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if not found:
        console.print("[dim]No local branches.[/dim]")
        return
    for branch in found:
        if branch.is_current:
            console.print(f"[green]*[/green] [bold]{branch.name}[/bold]", highlight=False)
        else:
            console.print(f"  {branch.name}", highlight=False)


# ── synth ─────────────────────────────────────────────────────────────────────


@app.command()
def synth(
    old_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Old version"),
    new_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="New version"),
) -> None:
    """Synthesise a diff between two local files without git."""
    from branchdiff.engine.synthesizer import synthesize

    old_content = old_file.read_text(encoding="utf-8", errors="replace")
    new_content = new_file.read_text(encoding="utf-8", errors="replace")
    print(synthesize(old_content, new_content, new_file.name), end="")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .branchdiff.toml"),
) -> None:
    """Generate a starter .branchdiff.toml in the repo root."""
    from branchdiff.config.defaults import DEFAULT_TOML
    from branchdiff.config.loader import CONFIG_FILE_NAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILE_NAME

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILE_NAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"branchdiff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """branchdiff — Compare git branches with move-aware change statistics."""
