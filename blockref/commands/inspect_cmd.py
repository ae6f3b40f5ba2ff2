"""
CLI command to summarize a serialized analysis.

Commands:
- blockref inspect   - Load a serialized analysis and print a readable summary
"""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..analysis.record import AnalysisRecord
from ..template.registry import TemplateInfoRegistry

console = Console()


def load_record(path: Path, registry: TemplateInfoRegistry) -> AnalysisRecord:
    """Read a serialized analysis (JSON) from disk."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return AnalysisRecord.from_dict(data, registry)


def run_inspect(path: Path, registry: TemplateInfoRegistry) -> int:
    """
    Print blocks, styles and correlations of a serialized analysis.

    Returns:
        Exit code (0 = success)
    """
    record = load_record(path, registry)

    console.print(f"[bold]{record.template.identifier}[/bold] [dim]({record.template.serialize()['type']})[/dim]")

    blocks = Table(title="Blocks")
    blocks.add_column("Local name", style="cyan")
    blocks.add_column("Source")
    for name, source in record.blocks.items():
        blocks.add_row(name, source)
    console.print(blocks)

    styles = Table(title="Styles Found")
    styles.add_column("#", justify="right")
    styles.add_column("Style", style="cyan")
    styles.add_column("Dynamic")
    for i, name in enumerate(record.styles_found):
        styles.add_row(str(i), name, "Yes" if i in record.dynamic_styles else "No")
    console.print(styles)

    if record.style_correlations:
        console.print("[bold]Correlations[/bold]")
        for names in record.correlation_names():
            console.print("  " + " + ".join(names))
    else:
        console.print("[dim]No correlations of two or more styles[/dim]")
    return 0
