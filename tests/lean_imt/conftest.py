"""Shared pytest fixtures for Lean-IMT tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from lean_imt import LeanIMT
from tests.lean_imt.helpers import h1, h2, make_tree


@pytest.fixture
def empty_tree() -> LeanIMT:
    """A tree with no leaves."""
    return LeanIMT(h1, h2)


@pytest.fixture
def tree_factory() -> Callable[[int], LeanIMT]:
    """Builds trees of a given size from sequential inserts."""
    return make_tree
