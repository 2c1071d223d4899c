"""YAML reporter — same document as the JSON reporter, easier to read in prompts."""

from __future__ import annotations

import yaml

from branchdiff.output.json_report import to_dict
from branchdiff.report.models import ComparisonReport


def render(report: ComparisonReport, *, include_diff: bool = True) -> str:
    """Return the report as a YAML document."""
    return yaml.safe_dump(
        to_dict(report, include_diff=include_diff),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
