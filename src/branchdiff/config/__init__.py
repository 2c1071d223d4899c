"""Configuration loading, schema, and defaults."""

from branchdiff.config.loader import ConfigError, load_config
from branchdiff.config.schema import OUTPUT_FORMATS, BranchDiffConfig

__all__ = [
    "OUTPUT_FORMATS",
    "BranchDiffConfig",
    "ConfigError",
    "load_config",
]
