"""
Error taxonomy for block reference analysis.

Every error here is a caller-contract violation, not a transient condition.
An analysis that raised one of these is in an undefined state: discard it
and restart the analysis for that template.
"""

from __future__ import annotations

from typing import Any


class BlockrefError(Exception):
    """Base class for all blockref errors."""


class UnknownTypeError(BlockrefError, LookupError):
    """A template info type name was looked up but never registered."""

    def __init__(self, type_name: str):
        super().__init__(f"No template info registered for {type_name}")
        self.type_name = type_name


class PrecedenceError(BlockrefError, ValueError):
    """A style was marked dynamic before it was added to the analysis."""

    def __init__(self, style: Any):
        super().__init__("Cannot mark style that hasn't yet been added as dynamic.")
        self.style = style


class SequencingError(BlockrefError, RuntimeError):
    """A new element was started while the previous one still holds uncommitted styles."""

    def __init__(self, message: str = "end_element() wasn't called after a previous call to start_element()"):
        super().__init__(message)


class WalkError(BlockrefError, ValueError):
    """A recorded walk script is malformed or references unknown blocks/styles."""


class ConfigError(BlockrefError, ValueError):
    """A configuration file is malformed."""
