"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

OutputFormat = Literal["terminal", "markdown", "json", "yaml"]

OUTPUT_FORMATS: tuple[str, ...] = ("terminal", "markdown", "json", "yaml")


@dataclass
class CompareConfig:
    base: str = "main"  # branch the compared branch is measured against
    max_commits: int = 20
    max_files_analyzed: int = 0  # 0 = analyse every changed file
    max_diff_bytes: int = 5 * 1024 * 1024  # per file; larger diffs keep raw counts
    detect_moves: bool = True


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_diff: bool = True
    show_summary: bool = True
    show_legend: bool = True


@dataclass
class IgnoreConfig:
    files: List[str] = field(default_factory=list)  # fnmatch globs on path or basename


@dataclass
class BranchDiffConfig:
    version: str = "1.0"
    compare: CompareConfig = field(default_factory=CompareConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)
