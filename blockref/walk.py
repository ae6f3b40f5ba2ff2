"""
Recorded walks.

Template parsing lives outside blockref. A walk script is the record of
what an external walker observed, and ``replay`` drives a
``TemplateAnalysis`` through it exactly as the walker would have:

    template:
      type: CssBlocks.TemplateInfo
      identifier: templates/app.hbs
    blocks:
      primary:
        source: .a.css
        styles: [".root", ".icon"]
        depends_on: [base]
      base:
        source: base.css
        bind: false            # dependency only, no local name
    elements:
      - styles: [primary.root]
      - styles: [primary.icon]
        dynamic: [primary.icon]
      - [primary.root, primary.icon]   # shorthand: styles only

Scripts ending in `.json` are read as JSON; anything else as YAML.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .analysis.template_analysis import TemplateAnalysis
from .blocks import SourceBlock, SourceStyle
from .errors import WalkError
from .template.info import SerializedTemplateInfo, TemplateInfo
from .template.registry import TemplateInfoRegistry

logger = logging.getLogger(__name__)

# alias followed by the style's source fragment: "primary.root", "nav[state|open]"
_STYLE_REF = re.compile(r"^(?P<alias>[^.\[:]+)(?P<fragment>[.\[:].*)$")


@dataclass
class WalkElement:
    styles: list[str] = field(default_factory=list)
    dynamic: list[str] = field(default_factory=list)


@dataclass
class WalkScript:
    """A parsed walk script with its blocks instantiated."""

    template: SerializedTemplateInfo
    blocks: dict[str, SourceBlock] = field(default_factory=dict)  # alias -> block
    bound: list[str] = field(default_factory=list)  # aliases bound in the template namespace
    elements: list[WalkElement] = field(default_factory=list)

    def resolve(self, ref: str) -> SourceStyle:
        """Resolve an ``<alias><fragment>`` reference to its single style instance."""
        match = _STYLE_REF.match(ref.strip())
        if not match:
            raise WalkError(f"Invalid style reference: {ref!r}")
        alias, fragment = match.group("alias"), match.group("fragment")
        block = self.blocks.get(alias)
        if block is None:
            raise WalkError(f"Unknown block alias in style reference: {ref!r}")
        if fragment not in block.styles:
            raise WalkError(f"Block {alias!r} has no style {fragment!r}")
        return block.styles[fragment]


def _string_list(value: Any, what: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise WalkError(f"{what} must be a list of strings")
    return list(value)


def _parse_template(raw: Any, default_identifier: str) -> SerializedTemplateInfo:
    if raw is None:
        return {"type": TemplateInfo.type_name, "identifier": default_identifier}
    if not isinstance(raw, dict):
        raise WalkError("template must be a mapping")
    template: SerializedTemplateInfo = {
        "type": str(raw.get("type") or TemplateInfo.type_name),
        "identifier": str(raw.get("identifier") or default_identifier),
    }
    if raw.get("data") is not None:
        if not isinstance(raw["data"], list):
            raise WalkError("template.data must be a list")
        template["data"] = list(raw["data"])
    return template


def _parse_blocks(raw: Any) -> tuple[dict[str, SourceBlock], list[str]]:
    if raw is None:
        return {}, []
    if not isinstance(raw, dict):
        raise WalkError("blocks must be a mapping of alias to block")

    blocks: dict[str, SourceBlock] = {}
    bound: list[str] = []
    depends: dict[str, list[str]] = {}
    for alias, entry in raw.items():
        alias = str(alias)
        if isinstance(entry, str):
            entry = {"source": entry}
        if not isinstance(entry, dict) or not isinstance(entry.get("source"), str):
            raise WalkError(f"Block {alias!r} must declare a source string")
        block = SourceBlock(entry["source"])
        for fragment in _string_list(entry.get("styles"), f"blocks.{alias}.styles"):
            block.style(fragment)
        blocks[alias] = block
        depends[alias] = _string_list(entry.get("depends_on"), f"blocks.{alias}.depends_on")
        bind = entry.get("bind", True)
        if not isinstance(bind, bool):
            raise WalkError(f"blocks.{alias}.bind must be true or false")
        if bind:
            bound.append(alias)

    for alias, dep_aliases in depends.items():
        for dep in dep_aliases:
            if dep not in blocks:
                raise WalkError(f"Block {alias!r} depends on unknown block {dep!r}")
            blocks[alias].dependencies.append(blocks[dep])

    return blocks, bound


def _parse_elements(raw: Any) -> list[WalkElement]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise WalkError("elements must be a list")
    elements: list[WalkElement] = []
    for n, item in enumerate(raw):
        if item is None:
            elements.append(WalkElement())
        elif isinstance(item, list):
            elements.append(WalkElement(styles=_string_list(item, f"elements[{n}]")))
        elif isinstance(item, dict):
            elements.append(
                WalkElement(
                    styles=_string_list(item.get("styles"), f"elements[{n}].styles"),
                    dynamic=_string_list(item.get("dynamic"), f"elements[{n}].dynamic"),
                )
            )
        else:
            raise WalkError(f"elements[{n}] must be a list of styles or a mapping")
    return elements


def parse_walk(data: Any, default_identifier: str = "<walk>") -> WalkScript:
    """Build a ``WalkScript`` from already-parsed YAML/JSON data."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise WalkError("walk script must be a mapping")

    blocks, bound = _parse_blocks(data.get("blocks"))
    script = WalkScript(
        template=_parse_template(data.get("template"), default_identifier),
        blocks=blocks,
        bound=bound,
        elements=_parse_elements(data.get("elements")),
    )

    # Resolve every reference up front so a bad script fails before replay.
    for element in script.elements:
        for ref in (*element.styles, *element.dynamic):
            script.resolve(ref)
    return script


def load_walk(path: Path) -> WalkScript:
    """Load a walk script from disk: JSON for `.json` files, YAML otherwise."""
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise WalkError(f"Failed to parse walk script {path}: {e}") from e
    return parse_walk(data, default_identifier=path.as_posix())


def replay(script: WalkScript, registry: TemplateInfoRegistry) -> TemplateAnalysis[TemplateInfo]:
    """Drive a fresh analysis through the recorded walk."""
    analysis: TemplateAnalysis[TemplateInfo] = TemplateAnalysis(registry.deserialize(script.template))
    for alias in script.bound:
        analysis.bind_block(alias, script.blocks[alias])

    for element in script.elements:
        analysis.start_element()
        for ref in element.styles:
            analysis.add_style(script.resolve(ref))
        for ref in element.dynamic:
            analysis.mark_dynamic(script.resolve(ref))
        analysis.end_element()

    logger.debug(
        "Replayed %d element(s) for %s: %d style(s) found",
        len(script.elements),
        analysis.template.identifier,
        len(analysis.styles_found),
    )
    return analysis
