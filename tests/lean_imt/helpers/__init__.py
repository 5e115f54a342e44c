"""Test helpers for Lean-IMT unit tests."""

from __future__ import annotations

from .builders import HASHER, h1, h2, make_leaves, make_tree
from .mocks import RecordingNodeHash

__all__ = [
    # Builders
    "HASHER",
    "h1",
    "h2",
    "make_leaves",
    "make_tree",
    # Mocks
    "RecordingNodeHash",
]
