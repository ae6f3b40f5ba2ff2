"""
CLI commands that replay a walk and emit the serialized analysis.

Commands:
- blockref analyze   - Replay a walk script and print the analysis
- blockref digest    - Print only the content address of the analysis
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from rich.console import Console

from ..analysis.canonical import SerializedTemplateAnalysis, analysis_digest, canonical_json
from ..analysis.template_analysis import StyleAnalysis
from ..template.registry import TemplateInfoRegistry
from ..walk import load_walk, replay

err = Console(stderr=True)


def render_analysis(serialized: SerializedTemplateAnalysis, output: str = "json", indent: int = 2) -> str:
    """Render a serialized analysis as JSON or YAML. Keys are always sorted."""
    if output == "yaml":
        return yaml.safe_dump(dict(serialized), sort_keys=True, default_flow_style=None)
    if indent <= 0:
        return canonical_json(serialized) + "\n"
    return json.dumps(serialized, indent=indent, sort_keys=True, ensure_ascii=False) + "\n"


def run_analyze(
    walk_path: Path,
    registry: TemplateInfoRegistry,
    *,
    output: str = "json",
    indent: int = 2,
    out: Path | None = None,
    show_digest: bool = False,
) -> int:
    """
    Replay a walk script and emit the serialized analysis.

    Args:
        walk_path: YAML/JSON walk script
        registry: Template info registry used to build the template info
        output: "json" or "yaml"
        indent: JSON indentation; 0 for compact canonical JSON
        out: Write to this file instead of stdout
        show_digest: Also print the sha256 content address to stderr

    Returns:
        Exit code (0 = success)
    """
    analysis = replay(load_walk(walk_path), registry)
    serialized = analysis.serialize()
    rendered = render_analysis(serialized, output, indent)

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(rendered, encoding="utf-8")
        err.print(f"Wrote analysis of {analysis.template.identifier} to {out}", style="green")
    else:
        print(rendered, end="")

    if show_digest:
        err.print(f"sha256:{analysis_digest(serialized)}", style="dim")
    return 0


def run_digest(walk_path: Path, registry: TemplateInfoRegistry) -> int:
    """Print the content address of a replayed walk's analysis."""
    analysis: StyleAnalysis = replay(load_walk(walk_path), registry)
    print(analysis_digest(analysis.serialize()))
    return 0
