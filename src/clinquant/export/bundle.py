"""Packaging of per-variable artifacts and multi-variable project archives.

Project archive layout::

    <domain>/<variable>/<variable>_bins.csv
    <domain>/<variable>/<variable>_tokenize.py
    <domain>/<variable>/<variable>_documentation.md
    <domain>/<variable>/<variable>_config.json
    tokenize_all_variables.py
    project_summary.md
"""

import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ..binning.labels import sanitize_name
from ..types import TokenBin, VariableConfig
from .manifest import generate_manifest
from .report import generate_report
from .source import function_name, generate_source
from .tabular import to_csv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariableExport:
    """A configured variable together with its finished bins."""

    config: VariableConfig
    bins: Sequence[TokenBin]

    @property
    def key(self) -> str:
        return sanitize_name(self.config.name)

    @property
    def domain(self) -> str:
        return sanitize_name(self.config.domain or "other")


def export_variable(
    bins: Sequence[TokenBin],
    config: VariableConfig,
    generated_at: Optional[str] = None,
) -> Dict[str, str]:
    """Render all four artifacts of one variable, keyed by file name."""
    key = sanitize_name(config.name)
    return {
        f"bin_definitions_{key}.csv": to_csv(bins, config),
        f"tokenize_{key}.py": generate_source(bins, config, generated_at),
        f"clinical_documentation_{key}.md": generate_report(bins, config, generated_at),
        f"specification_{key}.json": generate_manifest(bins, config, generated_at),
    }


def _master_module(project_name: str, variables: Sequence[VariableExport],
                   generated_at: Optional[str]) -> str:
    imports = "\n".join(
        f"from {v.domain}.{v.key}.{v.key}_tokenize import {function_name(v.config)}"
        for v in variables
    )
    registry = "\n".join(f"    {v.key!r}: {function_name(v.config)}," for v in variables)
    stamp = f"\nGenerated: {generated_at}" if generated_at else ""
    return f'''"""
Multi-variable tokenization
Project: {project_name}{stamp}

Master tokenization module for all {len(variables)} variables in this project.
"""

import pandas as pd

{imports}

TOKENIZERS = {{
{registry}
}}


def tokenize_all_variables(df: pd.DataFrame) -> pd.DataFrame:
    """Add a ``<variable>_token`` column for every known variable in ``df``."""
    result = df.copy()
    for variable_id, tokenize_fn in TOKENIZERS.items():
        if variable_id in df.columns:
            result[f"{{variable_id}}_token"] = df[variable_id].apply(tokenize_fn)
    return result


def tokenize_single_variable(variable_id: str, value: float) -> str:
    if variable_id not in TOKENIZERS:
        raise ValueError(f"Unknown variable: {{variable_id}}")
    return TOKENIZERS[variable_id](value)


def get_available_variables():
    return list(TOKENIZERS.keys())
'''


def _project_summary(project_name: str, variables: Sequence[VariableExport],
                     generated_at: Optional[str]) -> str:
    lines = [f"# Project Summary: {project_name}", ""]
    if generated_at:
        lines += [f"**Generated:** {generated_at}", ""]
    lines += [
        f"**Variables:** {len(variables)}  ",
        f"**Total tokens:** {sum(len(v.bins) for v in variables)}",
        "",
        "| Variable | Domain | Unit | Bins | Anchors |",
        "|----------|--------|------|------|---------|",
    ]
    for v in variables:
        lines.append(
            f"| {v.config.name or v.key} | {v.domain} | {v.config.unit or ''} "
            f"| {len(v.bins)} | {len(v.config.anchors)} |"
        )
    lines.append("")
    return "\n".join(lines)


def export_project(
    project_name: str,
    variables: Sequence[VariableExport],
    path: Union[str, Path],
    generated_at: Optional[str] = None,
) -> List[str]:
    """Write a zip archive of every variable's artifacts.

    Variables without bins are skipped. Returns the archive member names.

    Raises
    ------
    ValueError
        If two variables share the same sanitized name.
    """
    variables = [v for v in variables if len(v.bins) > 0]
    keys = [v.key for v in variables]
    duplicates = sorted({k for k in keys if keys.count(k) > 1})
    if duplicates:
        raise ValueError(f"Duplicate variable names in project: {duplicates}")

    members: Dict[str, str] = {}
    for v in variables:
        folder = f"{v.domain}/{v.key}"
        members[f"{folder}/{v.key}_bins.csv"] = to_csv(v.bins, v.config)
        members[f"{folder}/{v.key}_tokenize.py"] = generate_source(v.bins, v.config, generated_at)
        members[f"{folder}/{v.key}_documentation.md"] = generate_report(v.bins, v.config, generated_at)
        members[f"{folder}/{v.key}_config.json"] = generate_manifest(v.bins, v.config, generated_at)
    members["tokenize_all_variables.py"] = _master_module(project_name, variables, generated_at)
    members["project_summary.md"] = _project_summary(project_name, variables, generated_at)

    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in members.items():
            zf.writestr(name, content)

    logger.info("wrote project %s with %d variables to %s", project_name, len(variables), path)
    return list(members)
