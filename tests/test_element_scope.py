"""
Tests for the per-element Idle/Open state machine.

Exercised independently of any analysis or walker.
"""

from __future__ import annotations

import pytest

from blockref.analysis.element import ElementScope, ElementState
from blockref.errors import SequencingError


def test_initial_state_is_idle():
    scope: ElementScope[object] = ElementScope()
    assert scope.state is ElementState.IDLE
    assert scope.pending is None


def test_start_opens_without_allocating():
    scope: ElementScope[object] = ElementScope()
    scope.start()
    assert scope.state is ElementState.OPEN
    assert scope.pending is None


def test_commit_of_empty_element_yields_nothing():
    scope: ElementScope[object] = ElementScope()
    scope.start()
    assert scope.commit() is None
    assert scope.state is ElementState.IDLE


def test_commit_returns_snapshot_and_clears():
    a, b = object(), object()
    scope: ElementScope[object] = ElementScope()
    scope.start()
    scope.add(a)
    scope.add(b)
    scope.add(a)
    snapshot = scope.commit()
    assert snapshot is not None
    assert list(snapshot) == [a, b]
    assert scope.pending is None
    assert scope.state is ElementState.IDLE


def test_add_while_idle_opens_implicitly():
    a = object()
    scope: ElementScope[object] = ElementScope()
    scope.add(a)
    assert scope.state is ElementState.OPEN
    assert scope.pending is not None and a in scope.pending


def test_start_with_uncommitted_styles_raises():
    scope: ElementScope[object] = ElementScope()
    scope.start()
    scope.add(object())
    with pytest.raises(SequencingError):
        scope.start()


def test_start_after_empty_open_element_is_allowed():
    """An element that never received styles does not need to be ended."""
    scope: ElementScope[object] = ElementScope()
    scope.start()
    scope.start()
    assert scope.state is ElementState.OPEN


def test_commit_without_start_is_noop():
    scope: ElementScope[object] = ElementScope()
    assert scope.commit() is None
    assert scope.state is ElementState.IDLE
