"""
CLI command for template info registry introspection.

Commands:
- blockref types   - List all registered template info types
"""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from ..template.registry import TemplateInfoRegistry

console = Console()


def _describe(constructor: object) -> str:
    if isinstance(constructor, type):
        return f"{constructor.__module__}.{constructor.__qualname__}"
    return repr(constructor)


def run_types_list(registry: TemplateInfoRegistry, json_output: bool = False) -> int:
    """
    List all registered template info types.

    Returns:
        Exit code (0 = success)
    """
    types = registry.list_types()

    if json_output:
        output = [{"type": name, "constructor": _describe(registry.get(name))} for name in types]
        print(json.dumps(output, indent=2))
        return 0

    table = Table(title="Template Info Types")
    table.add_column("Type", style="cyan")
    table.add_column("Constructor")
    for name in types:
        table.add_row(name, _describe(registry.get(name)))

    console.print(table)
    console.print(f"\n[dim]Total: {len(types)} types[/dim]")
    return 0
