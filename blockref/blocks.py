"""
Blocks and block objects as seen by the analysis.

Parsing CSS and resolving block inheritance happen elsewhere. The analysis
only needs the small surface described by the ``Block`` and ``BlockObject``
protocols. ``SourceBlock`` and ``SourceStyle`` are plain implementations
used when replaying recorded walks.

Block objects are compared by identity throughout: both concrete classes
disable dataclass equality so that two equal-looking styles stay distinct.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, runtime_checkable

from .analysis.identity import IdentitySet


@runtime_checkable
class Block(Protocol):
    """A module of styles with a stable source identity."""

    source: str

    def transitive_block_dependencies(self) -> Iterable["Block"]:
        ...


@runtime_checkable
class BlockObject(Protocol):
    """One addressable style construct owned by a block."""

    @property
    def block(self) -> Block:
        ...

    def as_source(self) -> str:
        ...


@dataclass(eq=False)
class SourceBlock:
    """A block identified by its source, with declared direct dependencies."""

    source: str
    dependencies: list["SourceBlock"] = field(default_factory=list)
    styles: dict[str, "SourceStyle"] = field(default_factory=dict)  # fragment -> style

    def style(self, fragment: str) -> "SourceStyle":
        """Get or create the single style instance for a source fragment."""
        existing = self.styles.get(fragment)
        if existing is None:
            existing = SourceStyle(self, fragment)
            self.styles[fragment] = existing
        return existing

    def transitive_block_dependencies(self) -> IdentitySet["SourceBlock"]:
        """All blocks reachable through ``dependencies`` (excluding this block unless cyclic)."""
        visited: IdentitySet[SourceBlock] = IdentitySet()
        stack = list(self.dependencies)
        while stack:
            current = stack.pop()
            if not visited.add(current):
                continue
            stack.extend(current.dependencies)
        return visited

    def __repr__(self) -> str:
        return f"SourceBlock({self.source!r})"


@dataclass(eq=False)
class SourceStyle:
    """A style fragment (``.root``, ``[state|active]``, ...) of a ``SourceBlock``."""

    block: SourceBlock
    fragment: str

    def as_source(self) -> str:
        return self.fragment

    def __repr__(self) -> str:
        return f"SourceStyle({self.block.source!r}, {self.fragment!r})"
