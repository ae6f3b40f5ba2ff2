"""
Read-side view of a serialized template analysis.

Consumers (optimizer, cache) receive the wire form without the live block
objects. ``AnalysisRecord`` rebuilds the template info through a registry,
checks the wire shape, and answers the same questions as the live analysis
using canonical style names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..template.info import TemplateInfo
from ..template.registry import TemplateInfoRegistry
from .canonical import SerializedTemplateAnalysis


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


def _index_list(value: Any, size: int, what: str) -> list[int]:
    _require(isinstance(value, list), f"{what} must be a list")
    for i in value:
        _require(isinstance(i, int) and not isinstance(i, bool), f"{what} must contain integers")
        _require(0 <= i < size, f"{what} index {i} out of range for {size} styles")
    _require(value == sorted(value), f"{what} must be sorted ascending")
    return list(value)


@dataclass
class AnalysisRecord:
    """A deserialized template analysis."""

    template: TemplateInfo
    blocks: dict[str, str] = field(default_factory=dict)
    styles_found: list[str] = field(default_factory=list)
    dynamic_styles: list[int] = field(default_factory=list)
    style_correlations: list[list[int]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any], registry: TemplateInfoRegistry) -> "AnalysisRecord":
        """
        Validate and load a serialized analysis.

        Raises:
            ValueError: if the wire shape is invalid
            UnknownTypeError: if the template info type is not registered
        """
        _require(isinstance(data, dict), "analysis must be an object")
        for key in ("template", "blocks", "stylesFound", "dynamicStyles", "styleCorrelations"):
            _require(key in data, f"missing required field: {key}")

        template_raw = data["template"]
        _require(
            isinstance(template_raw, dict)
            and isinstance(template_raw.get("type"), str)
            and isinstance(template_raw.get("identifier"), str),
            "template must have string 'type' and 'identifier'",
        )
        _require(
            "data" not in template_raw or isinstance(template_raw["data"], list),
            "template.data must be a list",
        )

        blocks = data["blocks"]
        _require(
            isinstance(blocks, dict) and all(isinstance(v, str) for v in blocks.values()),
            "blocks must map local names to source strings",
        )

        styles = data["stylesFound"]
        _require(
            isinstance(styles, list) and all(isinstance(s, str) for s in styles),
            "stylesFound must be a list of strings",
        )
        _require(styles == sorted(styles), "stylesFound must be sorted ascending")

        dynamic = _index_list(data["dynamicStyles"], len(styles), "dynamicStyles")

        correlations_raw = data["styleCorrelations"]
        _require(isinstance(correlations_raw, list), "styleCorrelations must be a list")
        correlations: list[list[int]] = []
        for n, corr in enumerate(correlations_raw):
            indices = _index_list(corr, len(styles), f"styleCorrelations[{n}]")
            _require(len(indices) > 1, f"styleCorrelations[{n}] must have at least two styles")
            correlations.append(indices)

        return cls(
            template=registry.deserialize(template_raw),
            blocks=dict(blocks),
            styles_found=list(styles),
            dynamic_styles=dynamic,
            style_correlations=correlations,
        )

    def to_dict(self) -> SerializedTemplateAnalysis:
        return {
            "template": self.template.serialize(),
            "blocks": dict(self.blocks),
            "stylesFound": list(self.styles_found),
            "dynamicStyles": list(self.dynamic_styles),
            "styleCorrelations": [list(c) for c in self.style_correlations],
        }

    def _index(self, name: str) -> int | None:
        try:
            return self.styles_found.index(name)
        except ValueError:
            return None

    def was_found(self, name: str) -> bool:
        return name in self.styles_found

    def is_dynamic(self, name: str) -> bool:
        i = self._index(name)
        return i is not None and i in self.dynamic_styles

    def are_correlated(self, *names: str) -> bool:
        """
        True if some recorded correlation contains all the named styles.

        Single-style correlations are not part of the wire form, so a lone
        name is only reported as correlated when it co-occurs with another style.
        """
        indices = [self._index(n) for n in names]
        if any(i is None for i in indices):
            return False
        wanted = set(indices)
        return any(wanted.issubset(c) for c in self.style_correlations)

    def correlation_names(self) -> list[list[str]]:
        """Correlations with indices resolved to canonical style names."""
        return [[self.styles_found[i] for i in c] for c in self.style_correlations]
