"""
Template analysis: bookkeeping of block objects referenced by a template.

A ``TemplateAnalysis`` is driven by an external walk over a template's
element tree:

1. Call ``start_element()`` at the beginning of a new element.
2. Call ``add_style(obj)`` for every style used on the current element.
3. Call ``mark_dynamic(obj)`` for every style on it that may apply conditionally.
4. Call ``end_element()`` when done adding styles for the current element.

Always call ``end_element()`` before the next ``start_element()``, even when
elements are nested in the document.

After the walk, ``serialize()`` produces the canonical wire form consumed by
the optimizer and by caches.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar, runtime_checkable

from ..errors import PrecedenceError
from .canonical import SerializedTemplateAnalysis
from .element import ElementScope, ElementState
from .identity import FrozenIdentitySet, IdentitySet

if TYPE_CHECKING:
    from ..blocks import Block, BlockObject
    from ..template.info import TemplateInfo

logger = logging.getLogger(__name__)

TemplateT = TypeVar("TemplateT", bound="TemplateInfo")


@runtime_checkable
class StyleAnalysis(Protocol):
    """Query surface the optimizer relies on."""

    def was_found(self, style: "BlockObject") -> bool:
        ...

    def is_dynamic(self, style: "BlockObject") -> bool:
        ...

    def are_correlated(self, *styles: "BlockObject") -> bool:
        ...

    def referenced_blocks(self) -> list["Block"]:
        ...

    def block_dependencies(self) -> IdentitySet["Block"]:
        ...

    def transitive_block_dependencies(self) -> IdentitySet["Block"]:
        ...

    def serialize(self) -> SerializedTemplateAnalysis:
        ...


class TemplateAnalysis(Generic[TemplateT]):
    """
    Performs bookkeeping and keeps the block objects referenced within one
    template internally consistent.

    Attributes:
        template: The template being analyzed.
        blocks: Local name -> block. The local name must be a legal CSS
            ident, but this is not validated here; uniqueness of the block
            per name is the caller's responsibility.
        styles_found: Every block object used in the template. Membership is
            by identity, so the same instance must be used for the same block
            object over the whole analysis.
        dynamic_styles: The subset of ``styles_found`` that may be applied
            dynamically. An important signal to the optimizer.
        style_correlations: Styles used together on the same element, one
            immutable set per element that had at least one style, in the
            order the elements were ended.
    """

    def __init__(self, template: TemplateT):
        self.template = template
        self.blocks: dict[str, Block] = {}
        self.styles_found: IdentitySet[BlockObject] = IdentitySet()
        self.dynamic_styles: IdentitySet[BlockObject] = IdentitySet()
        self.style_correlations: list[FrozenIdentitySet[BlockObject]] = []
        self._element: ElementScope[BlockObject] = ElementScope()

    # ------------------------------------------------------------------
    # Mutation protocol
    # ------------------------------------------------------------------

    def bind_block(self, local_name: str, block: "Block") -> "TemplateAnalysis[TemplateT]":
        """Bind a block under a local name. Rebinding a name replaces it."""
        self.blocks[local_name] = block
        return self

    def add_style(self, obj: "BlockObject") -> "TemplateAnalysis[TemplateT]":
        """Record a block object referenced on the current element."""
        self.styles_found.add(obj)
        self._element.add(obj)
        return self

    def mark_dynamic(self, obj: "BlockObject") -> "TemplateAnalysis[TemplateT]":
        """
        Record that a block object is applied dynamically.

        Raises:
            PrecedenceError: if ``obj`` was not added with ``add_style`` first
        """
        if obj not in self.styles_found:
            raise PrecedenceError(obj)
        self.dynamic_styles.add(obj)
        return self

    def start_element(self) -> "TemplateAnalysis[TemplateT]":
        """
        Indicate a new element in the template.

        No allocation happens until a style is added, so it is safe to call
        before knowing whether the element has any styles.

        Raises:
            SequencingError: if the previous element has uncommitted styles
        """
        self._element.start()
        return self

    def end_element(self) -> "TemplateAnalysis[TemplateT]":
        """Indicate all styles for the current element have been found."""
        correlation = self._element.commit()
        if correlation is not None:
            self.style_correlations.append(correlation)
        return self

    @property
    def element_state(self) -> ElementState:
        return self._element.state

    @property
    def current_correlation(self) -> FrozenIdentitySet["BlockObject"] | None:
        """Styles added to the open element so far (a snapshot), or None."""
        pending = self._element.pending
        return pending.frozen() if pending is not None else None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_block_name(self, block: "Block") -> str | None:
        """The first local name bound to ``block`` (by identity), or None."""
        for name, bound in self.blocks.items():
            if bound is block:
                return name
        return None

    def serialized_name(self, obj: "BlockObject") -> str:
        """The canonical name of a block object: its block's local name plus its source."""
        return f"{self.get_block_name(obj.block) or ''}{obj.as_source()}"

    def referenced_blocks(self) -> list["Block"]:
        """All bound blocks, once per local name."""
        return list(self.blocks.values())

    def block_dependencies(self) -> IdentitySet["Block"]:
        return IdentitySet(self.referenced_blocks())

    def transitive_block_dependencies(self) -> IdentitySet["Block"]:
        """Bound blocks plus everything they report as transitive dependencies."""
        deps = self.block_dependencies()
        stack = list(deps)
        while stack:
            block = stack.pop()
            for dep in block.transitive_block_dependencies():
                if deps.add(dep):
                    stack.append(dep)
        return deps

    def are_correlated(self, *styles: "BlockObject") -> bool:
        """True if some committed correlation contains all the given styles."""
        return any(c.issuperset_of(styles) for c in self.style_correlations)

    def is_dynamic(self, style: "BlockObject") -> bool:
        return style in self.dynamic_styles

    def was_found(self, style: "BlockObject") -> bool:
        return style in self.styles_found

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize(self) -> SerializedTemplateAnalysis:
        """
        Generate the canonical wire form of this analysis.

        Styles are indexed by their sorted canonical names, not by discovery
        order, so semantically identical analyses serialize identically no
        matter how the template was walked. Single-style correlations carry
        no co-occurrence information and are dropped.

        Styles on an element that has not been ended yet are counted in
        ``stylesFound``/``dynamicStyles`` but are absent from
        ``styleCorrelations``.
        """
        if self._element.pending:
            logger.debug(
                "Serializing %s with %d uncommitted style(s) on the open element",
                self.template.identifier,
                len(self._element.pending),
            )

        block_refs = {name: block.source for name, block in self.blocks.items()}

        names = {id(s): self.serialized_name(s) for s in self.styles_found}
        styles = sorted(names.values())
        index: dict[str, int] = {}
        for i, name in enumerate(styles):
            index.setdefault(name, i)

        dynamic = sorted(index[names[id(s)]] for s in self.dynamic_styles)

        correlations: list[list[int]] = []
        for correlation in self.style_correlations:
            if len(correlation) > 1:
                correlations.append(sorted(index[names[id(s)]] for s in correlation))

        return {
            "template": self.template.serialize(),
            "blocks": block_refs,
            "stylesFound": styles,
            "dynamicStyles": dynamic,
            "styleCorrelations": correlations,
        }
