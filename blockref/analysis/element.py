"""
Per-element correlation scope.

The walker only promises paired start/end notifications; it gives no depth
or stack guarantee. ``ElementScope`` is the small Idle/Open state machine
that groups the styles seen on one element:

    IDLE --start()--> OPEN(empty) --add()*--> OPEN(non-empty) --commit()--> IDLE

A correlation is produced only on the OPEN(non-empty) -> IDLE edge.
Adding a style while idle opens an element implicitly.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Generic, TypeVar

from ..errors import SequencingError
from .identity import FrozenIdentitySet, IdentitySet

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ElementState(str, Enum):
    IDLE = "idle"
    OPEN = "open"


class ElementScope(Generic[T]):
    """Scratch correlation for the element currently being walked."""

    def __init__(self) -> None:
        self._open = False
        self._pending: IdentitySet[T] | None = None

    @property
    def pending(self) -> IdentitySet[T] | None:
        """The uncommitted styles of the open element, or None if nothing was added yet."""
        return self._pending

    @property
    def state(self) -> ElementState:
        return ElementState.OPEN if self._open else ElementState.IDLE

    def start(self) -> None:
        """Begin a new element. Fails if a previous element still holds uncommitted styles."""
        if self._pending:
            raise SequencingError()
        # No allocation until a style is added.
        self._pending = None
        self._open = True

    def add(self, style: T) -> None:
        if self._pending is None:
            self._pending = IdentitySet()
        self._pending.add(style)
        self._open = True

    def commit(self) -> FrozenIdentitySet[T] | None:
        """Close the element. Returns an immutable snapshot when it had styles."""
        pending, self._pending = self._pending, None
        self._open = False
        if not pending:
            return None
        logger.debug("Committed correlation of %d style(s)", len(pending))
        return pending.frozen()
