"""Load and merge configuration from .branchdiff.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from branchdiff.config.schema import (
    OUTPUT_FORMATS,
    BranchDiffConfig,
    CompareConfig,
    IgnoreConfig,
    OutputConfig,
)

CONFIG_FILE_NAME = ".branchdiff.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: BranchDiffConfig) -> None:
    """Apply BRANCHDIFF_* environment variable overrides."""
    if val := os.environ.get("BRANCHDIFF_BASE"):
        cfg.compare.base = val.strip()
    if val := os.environ.get("BRANCHDIFF_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("BRANCHDIFF_MAX_COMMITS"):
        try:
            cfg.compare.max_commits = int(val)
        except ValueError:
            pass
    if val := os.environ.get("BRANCHDIFF_IGNORE"):
        sep = ":" if os.name != "nt" else ";"
        cfg.ignore.files.extend(p.strip() for p in val.split(sep) if p.strip())


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    raw_section = data.get(section, {})
    if not isinstance(raw_section, dict):
        raise ConfigError(f"[{section}] must be a table")
    filtered = {k: v for k, v in raw_section.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: BranchDiffConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Invalid output format {cfg.output.format!r}; "
            f"expected one of {', '.join(OUTPUT_FORMATS)}"
        )
    for name in ("max_commits", "max_files_analyzed", "max_diff_bytes"):
        value = getattr(cfg.compare, name)
        if not isinstance(value, int) or value < 0:
            raise ConfigError(f"compare.{name} must be a non-negative integer")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> BranchDiffConfig:
    """Load, validate, and return a BranchDiffConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = BranchDiffConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = BranchDiffConfig(
            version=raw.get("version", "1.0"),
            compare=_build_section(raw, CompareConfig, "compare"),
            output=_build_section(raw, OutputConfig, "output"),
            ignore=_build_section(raw, IgnoreConfig, "ignore"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
